"""
Tests for the health, root, and store directory endpoints.
"""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture
def client():
    return TestClient(app)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["name"] == "NutriCart API"
        assert data["version"] == "1.0.0"
        assert data["uptime_seconds"] >= 0
        assert isinstance(data["db_enabled"], bool)
        assert set(data["config"]) == {"edamam_app_id", "edamam_app_key", "usda_api_key", "database_url"}

    @patch.dict(os.environ, {"EDAMAM_APP_ID": "id", "EDAMAM_APP_KEY": "key", "USDA_API_KEY": "DEMO_KEY"})
    def test_health_reports_config(self, client):
        config = client.get("/health").json()["config"]
        assert config["edamam_app_id"] is True
        assert config["edamam_app_key"] is True
        assert config["usda_api_key"] is False

    def test_root(self, client):
        data = client.get("/").json()
        assert data["name"] == "NutriCart API"
        assert data["docs"] == "/docs"


class TestStores:
    def test_list_stores(self, client):
        stores = client.get("/stores").json()
        assert len(stores) == 8
        assert stores[0] == {
            "id": 1,
            "name": "Costco",
            "url": "https://www.costco.ca/grocery-household.html",
            "option": "7-10 day delivery",
        }
