"""
Shared fixtures for the NutriCart test suite.

Every test runs with:
- events written to a temporary events.log instead of the working directory
- a fresh in-memory profile store
- empty anonymous carts and no search sessions
"""

import time
from typing import Any, Dict, List
from unittest.mock import patch

import pytest

from nutricart import cart as cart_module
from nutricart.connectors.base import PagedQueryClient
from nutricart.profiles import InMemoryProfileStore, set_profile_store


class FakePagedClient(PagedQueryClient):
    """Paged client returning deterministic items and recording every call."""
    source = "fake"

    def __init__(self, errors: Dict[int, Exception] = None) -> None:
        self.calls: List[tuple] = []
        # call number (1-based) -> exception raised by that call
        self.errors = errors or {}

    def fetch(self, query: str, offset: int, limit: int) -> List[Dict[str, Any]]:
        self.calls.append((query, offset, limit))
        error = self.errors.get(len(self.calls))
        if error is not None:
            raise error
        return [{"query": query, "position": offset + i} for i in range(limit)]


@pytest.fixture(autouse=True)
def isolated_event_log(tmp_path):
    """Redirect the JSONL event log into the test's tmp_path."""
    log_file = tmp_path / "events.log"
    with patch("nutricart.events.EVENT_LOG_FILE", log_file):
        yield log_file


@pytest.fixture(autouse=True)
def profile_store():
    """Fresh in-memory profile store, installed as the process-wide store."""
    store = InMemoryProfileStore()
    set_profile_store(store)
    cart_module.CART_STORE.clear()
    yield store
    set_profile_store(None)
    cart_module.CART_STORE.clear()


class SlowProfileStore(InMemoryProfileStore):
    """In-memory store whose reads pause, widening any read-modify-write gap."""

    def get(self, user_id):
        profile = super().get(user_id)
        time.sleep(0.01)
        return profile


@pytest.fixture
def slow_profile_store():
    return SlowProfileStore()


@pytest.fixture
def fake_client():
    return FakePagedClient()


@pytest.fixture
def make_client():
    """Factory for FakePagedClient with per-call errors."""
    return FakePagedClient


@pytest.fixture
def oat_milk() -> Dict[str, Any]:
    """FoodItem dict as returned by the grocery search."""
    return {
        "fdc_id": 2346404,
        "description": "OAT MILK",
        "brand_owner": "Oatly Inc.",
        "data_type": "Branded",
        "food_nutrients": [
            {"nutrient_id": 1004, "name": "Total lipid (fat)", "amount": 3.0, "unit": "G"},
            {"nutrient_id": 1093, "name": "Sodium, Na", "amount": 100.0, "unit": "MG"},
        ],
    }


@pytest.fixture
def apple() -> Dict[str, Any]:
    return {
        "fdc_id": 171688,
        "description": "Apples, raw, with skin",
        "brand_owner": None,
        "data_type": "SR Legacy",
        "food_nutrients": [
            {"nutrient_id": 1079, "name": "Fiber, total dietary", "amount": 2.4, "unit": "G"},
            {"nutrient_id": 2000, "name": "Sugars, total", "amount": 10.0, "unit": "G"},
        ],
    }
