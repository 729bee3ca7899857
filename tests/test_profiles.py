"""
Tests for the profile stores (in-memory and SQLAlchemy-backed).
"""

import pytest

from nutricart.db import make_session_factory
from nutricart.errors import ProfileNotFound
from nutricart.models import DailyValue, UserProfile
from nutricart.profiles import InMemoryProfileStore, SqlProfileStore, set_daily_values


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path):
    """Run every test against both backends."""
    if request.param == "memory":
        return InMemoryProfileStore()
    return SqlProfileStore(make_session_factory(f"sqlite:///{tmp_path}/profiles.db"))


class TestProfileStore:
    def test_get_missing(self, store):
        assert store.get("nobody") is None

    def test_put_and_get(self, store):
        store.put(UserProfile(user_id="alice", daily_values=[DailyValue(id=1, value=78)]))

        profile = store.get("alice")
        assert profile.user_id == "alice"
        assert profile.daily_values == [DailyValue(id=1, value=78)]

    def test_put_replaces(self, store):
        store.put(UserProfile(user_id="alice", cart=[{"fdc_id": 1, "description": "Bread"}]))
        store.put(UserProfile(user_id="alice"))
        assert store.get("alice").cart == []

    def test_get_returns_copies(self, store):
        """Mutating a loaded profile doesn't change the stored one."""
        store.put(UserProfile(user_id="alice"))
        store.get("alice").cart.append({"fdc_id": 1, "description": "Bread"})
        assert store.get("alice").cart == []

    def test_delete(self, store):
        store.put(UserProfile(user_id="alice"))
        store.delete("alice")
        store.delete("alice")
        assert store.get("alice") is None

    def test_require(self, store):
        with pytest.raises(ProfileNotFound) as exc_info:
            store.require("nobody")
        assert exc_info.value.user_id == "nobody"
        assert "nobody" in str(exc_info.value)

    def test_update_creates_profile(self, store):
        def apply(profile):
            profile.cart = [{"fdc_id": 1, "description": "Bread"}]

        store.update("bob", apply)
        assert len(store.get("bob").cart) == 1

    def test_failed_update_is_not_stored(self, store):
        store.put(UserProfile(user_id="bob", cart=[{"fdc_id": 1, "description": "Bread"}]))

        def apply(profile):
            profile.cart = []
            raise ValueError("nothing to do")

        with pytest.raises(ValueError):
            store.update("bob", apply)
        assert len(store.get("bob").cart) == 1


class TestSetDailyValues:
    def test_sorted_and_deduplicated(self, store):
        profile = set_daily_values(store, "alice", [
            DailyValue(id=6, value=2300),
            DailyValue(id=1, value=70),
            DailyValue(id=1, value=78),
        ])

        assert [(dv.id, dv.value) for dv in profile.daily_values] == [(1, 78), (6, 2300)]
        assert store.get("alice").daily_values == profile.daily_values

    def test_keeps_cart(self, store):
        store.put(UserProfile(user_id="alice", cart=[{"fdc_id": 1, "description": "Bread"}]))
        set_daily_values(store, "alice", [DailyValue(id=1, value=78)])
        assert len(store.get("alice").cart) == 1

    def test_rejects_unknown_nutrient(self):
        with pytest.raises(ValueError):
            DailyValue(id=34, value=1)
