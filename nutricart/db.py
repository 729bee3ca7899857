"""
Database persistence layer for user profiles and analytics events.

This module provides an optional SQL-backed persistence layer that is enabled
by setting the DATABASE_URL environment variable. If DATABASE_URL is not set,
db_is_enabled() returns False and callers fall back to in-memory storage
(profiles) or the JSONL file (events).

Profiles are stored as one JSON document per user, mirroring the document
store the app was designed around: the row is keyed by user id and the
payload holds daily values, the cart, and the order history.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class ProfileRow(Base):
    """User profiles table - one JSON document per user id."""
    __tablename__ = "user_profiles"

    user_id = Column(String(255), primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))


class EventRow(Base):
    """Events table - stores analytics events for user actions."""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime, nullable=False, index=True)
    session_id = Column(String(255), nullable=True, index=True)
    event_type = Column(String(100), nullable=False, index=True)
    payload = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_event_type_ts", "event_type", "ts"),
    )


def make_session_factory(database_url: str) -> sessionmaker:
    """
    Create an engine for database_url, create missing tables, and return a session factory.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database cannot be reached
    """
    engine = create_engine(database_url, pool_pre_ping=True, echo=False)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


DATABASE_URL = os.getenv("DATABASE_URL")
SessionLocal: Optional[sessionmaker] = None

if DATABASE_URL:
    try:
        SessionLocal = make_session_factory(DATABASE_URL)
        logger.info("Database connection initialized (DATABASE_URL is set)")
    except Exception as e:
        logger.error(f"Failed to initialize database connection: {e}")
        SessionLocal = None


def db_is_enabled() -> bool:
    """True if DATABASE_URL is set and the connection could be initialized."""
    return SessionLocal is not None


def get_db_session():
    """
    Get a database session.

    Raises:
        RuntimeError: If database is not enabled
    """
    if not db_is_enabled():
        raise RuntimeError("Database is not enabled. Set DATABASE_URL environment variable.")
    return SessionLocal()


def db_log_event(
    event_type: str,
    session_id: Optional[str],
    payload: Optional[Dict[str, Any]],
) -> None:
    """
    Insert a single event row into the database.

    Errors are logged at debug level and swallowed; analytics never break the app.
    """
    if not db_is_enabled():
        return

    db = get_db_session()
    try:
        db.add(EventRow(
            ts=datetime.now(timezone.utc),
            session_id=session_id,
            event_type=event_type,
            payload=json.dumps(payload) if payload else None,
        ))
        db.commit()
    except Exception as e:
        db.rollback()
        logger.debug(f"Error logging event to database: {e}")
    finally:
        db.close()
