"""
Tests for environment-based configuration.
"""

import os
from unittest.mock import patch

import pytest

from api.config import (
    EdamamConfig,
    SearchConfig,
    UsdaConfig,
    get_backend_url,
    get_required_env_vars,
    validate_required_config,
)


class TestSearchConfig:
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        assert SearchConfig.get_page_size() == 10
        assert SearchConfig.get_search_limit() == 100
        assert SearchConfig.get_timeout_seconds() == 15

    @patch.dict(os.environ, {"SEARCH_PAGE_SIZE": "20", "SEARCH_LIMIT": "60", "HTTP_TIMEOUT_SECONDS": "5"})
    def test_overrides(self):
        assert SearchConfig.get_page_size() == 20
        assert SearchConfig.get_search_limit() == 60
        assert SearchConfig.get_timeout_seconds() == 5

    @patch.dict(os.environ, {"SEARCH_PAGE_SIZE": "ten", "SEARCH_LIMIT": ""})
    def test_invalid_values_use_defaults(self):
        assert SearchConfig.get_page_size() == 10
        assert SearchConfig.get_search_limit() == 100

    @patch.dict(os.environ, {"SEARCH_PAGE_SIZE": "0"})
    def test_page_size_at_least_one(self):
        assert SearchConfig.get_page_size() == 1


class TestConnectorConfig:
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        assert EdamamConfig.get_app_id() is None
        assert EdamamConfig.get_base_url() == "https://api.edamam.com"
        assert UsdaConfig.get_api_key() == "DEMO_KEY"
        assert get_backend_url() == "http://localhost:8000"

    @patch.dict(os.environ, {"BACKEND_URL": "https://api.nutricart.example/"})
    def test_backend_url_trailing_slash(self):
        assert get_backend_url() == "https://api.nutricart.example"

    @patch.dict(os.environ, {"USDA_API_KEY": "real-key", "DATABASE_URL": "sqlite://"}, clear=True)
    def test_required_env_vars(self):
        assert get_required_env_vars() == {
            "edamam_app_id": False,
            "edamam_app_key": False,
            "usda_api_key": True,
            "database_url": True,
        }


class TestValidateRequiredConfig:
    @patch.dict(os.environ, {}, clear=True)
    def test_missing(self):
        with pytest.raises(RuntimeError) as exc_info:
            validate_required_config()
        assert "EDAMAM_APP_ID" in str(exc_info.value)
        assert "EDAMAM_APP_KEY" in str(exc_info.value)

    @patch.dict(os.environ, {"EDAMAM_APP_ID": "id", "EDAMAM_APP_KEY": "key"}, clear=True)
    def test_complete(self):
        validate_required_config()
