"""
User profile store.

Each user has one profile document holding their daily values, their cart
(one entry per item added), and their order history. The store is a plain
key-value interface keyed by user id:

- InMemoryProfileStore: process-local dict, used when DATABASE_URL is not set
- SqlProfileStore: SQLAlchemy-backed, one JSON payload row per user

get_profile_store() returns the process-wide store, picking the backend from
the database configuration.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.orm import sessionmaker

from .db import ProfileRow, SessionLocal, db_is_enabled
from .errors import ProfileNotFound
from .models import DailyValue, UserProfile

logger = logging.getLogger(__name__)


class ProfileStore(ABC):
    """
    Key-value store of UserProfile documents.

    update() runs load, mutate, and store under one store-wide lock, so
    concurrent updates of the same profile are applied one after another.
    """

    def __init__(self) -> None:
        self._update_lock = threading.RLock()

    @abstractmethod
    def get(self, user_id: str) -> Optional[UserProfile]:
        """Return the profile for user_id, or None if there is none."""
        pass

    @abstractmethod
    def put(self, profile: UserProfile) -> None:
        """Create or replace a profile."""
        pass

    @abstractmethod
    def delete(self, user_id: str) -> None:
        """Remove a profile; no-op if it does not exist."""
        pass

    def get_or_create(self, user_id: str) -> UserProfile:
        profile = self.get(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id)
            self.put(profile)
        return profile

    def require(self, user_id: str) -> UserProfile:
        """
        Return the profile for user_id.

        Raises:
            ProfileNotFound: If the user has no profile
        """
        profile = self.get(user_id)
        if profile is None:
            raise ProfileNotFound(user_id)
        return profile

    def update(self, user_id: str, fn: Callable[[UserProfile], None]) -> UserProfile:
        """
        Load (or create) a profile, let fn mutate it, and store the result.

        If fn raises, its changes are not stored and the exception propagates.
        """
        with self._update_lock:
            profile = self.get_or_create(user_id)
            fn(profile)
            self.put(profile)
            return profile


class InMemoryProfileStore(ProfileStore):
    """Profiles kept in a dict; lost on restart."""

    def __init__(self) -> None:
        super().__init__()
        self._profiles: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[UserProfile]:
        with self._lock:
            payload = self._profiles.get(user_id)
        if payload is None:
            return None
        return UserProfile.model_validate_json(payload)

    def put(self, profile: UserProfile) -> None:
        payload = profile.model_dump_json()
        with self._lock:
            self._profiles[profile.user_id] = payload

    def delete(self, user_id: str) -> None:
        with self._lock:
            self._profiles.pop(user_id, None)


class SqlProfileStore(ProfileStore):
    """Profiles stored as JSON payload rows through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker) -> None:
        super().__init__()
        self.session_factory = session_factory

    def get(self, user_id: str) -> Optional[UserProfile]:
        db = self.session_factory()
        try:
            row = db.get(ProfileRow, user_id)
            if row is None:
                return None
            return UserProfile.model_validate(json.loads(row.payload))
        finally:
            db.close()

    def put(self, profile: UserProfile) -> None:
        db = self.session_factory()
        try:
            row = db.get(ProfileRow, profile.user_id)
            payload = profile.model_dump_json()
            if row is None:
                db.add(ProfileRow(user_id=profile.user_id, payload=payload))
            else:
                row.payload = payload
                row.updated_at = datetime.now(timezone.utc)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error storing profile for {profile.user_id}: {e}")
            raise
        finally:
            db.close()

    def delete(self, user_id: str) -> None:
        db = self.session_factory()
        try:
            db.query(ProfileRow).filter(ProfileRow.user_id == user_id).delete()
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting profile for {user_id}: {e}")
            raise
        finally:
            db.close()


_store: Optional[ProfileStore] = None
_store_lock = threading.Lock()


def get_profile_store() -> ProfileStore:
    """Process-wide profile store (SQL when DATABASE_URL is set, else in-memory)."""
    global _store
    with _store_lock:
        if _store is None:
            if db_is_enabled():
                logger.info("Using SQL profile store")
                _store = SqlProfileStore(SessionLocal)
            else:
                logger.info("DATABASE_URL not set, using in-memory profile store")
                _store = InMemoryProfileStore()
        return _store


def set_profile_store(store: Optional[ProfileStore]) -> None:
    """Replace the process-wide store (None resets to the configured default)."""
    global _store
    with _store_lock:
        _store = store


def set_daily_values(store: ProfileStore, user_id: str, values: Iterable[DailyValue]) -> UserProfile:
    """
    Replace a user's daily values.

    Entries are de-duplicated by id (last one wins) and sorted by id.
    """
    by_id: Dict[int, DailyValue] = {}
    for value in values:
        by_id[value.id] = value
    ordered: List[DailyValue] = [by_id[i] for i in sorted(by_id)]

    def apply(profile: UserProfile) -> None:
        profile.daily_values = ordered

    logger.info("Daily values updated for user %s: %d nutrients", user_id, len(ordered))
    return store.update(user_id, apply)
