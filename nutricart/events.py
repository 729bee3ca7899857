# nutricart/events.py
"""
Event logging for NutriCart.

Responsibilities:
- Provide a single log_event(...) function that:
  - Tries to write events to the DB via db_log_event() when DB is enabled.
  - Always writes a JSONL record to events.log.
  - Never raises exceptions (analytics are strictly non-blocking).

- Provide small helper functions for common event types:
  - log_search_submitted(...)
  - log_page_navigated(...)
  - log_cart_items_added(...) / log_cart_items_removed(...)
  - log_recipe_viewed(...)
  - log_order_placed(...)
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .db import db_is_enabled, db_log_event

logger = logging.getLogger(__name__)

# JSONL file with one event per line.
EVENT_LOG_FILE = Path("events.log")


def _write_to_file(record: Dict[str, Any]) -> None:
    """
    Append a single JSON record to events.log as JSONL.
    Never raise exceptions.
    """
    try:
        path = Path(EVENT_LOG_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
    except Exception as exc:
        logger.debug("Failed to write event to file: %s", exc)


def log_event(
    event: str,
    session_id: Optional[str],
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Core event logger.

    Behavior:
    - Build a record with keys: ts, event, session_id, payload.
    - If db_is_enabled() is True, attempt to log to DB via db_log_event().
      Any DB error is swallowed and we still write to file.
    - Always write the JSONL record to events.log.
    - Never raise exceptions.
    """
    record = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "session_id": session_id,
        "payload": payload or {},
    }

    if db_is_enabled():
        try:
            db_log_event(event_type=event, session_id=session_id, payload=record["payload"])
        except Exception as exc:
            logger.debug("db_log_event failed (event=%s): %s", event, exc)

    _write_to_file(record)


# ---------------------------------------------------------------------------
# Helper functions for common event types
# ---------------------------------------------------------------------------

def log_search_submitted(
    session_id: Optional[str],
    kind: str,
    query: str,
    status: str,
    result_count: int,
) -> None:
    """
    Log a search_submitted event.

    payload:
    {
        "kind": "recipes" | "foods",
        "query": "...",
        "status": "ok" | "error",
        "result_count": 10
    }
    """
    log_event("search_submitted", session_id, {
        "kind": kind,
        "query": query,
        "status": status,
        "result_count": result_count,
    })


def log_page_navigated(
    session_id: Optional[str],
    kind: str,
    target: str,
    status: str,
    active_page: Optional[int],
) -> None:
    """Log a page_navigated event (one per navigation, including no-ops)."""
    log_event("page_navigated", session_id, {
        "kind": kind,
        "target": target,
        "status": status,
        "active_page": active_page,
    })


def log_cart_items_added(session_id: Optional[str], fdc_id: int, count: int) -> None:
    log_event("cart_item_added", session_id, {"fdc_id": fdc_id, "count": count})


def log_cart_items_removed(session_id: Optional[str], fdc_id: int, count: int) -> None:
    log_event("item_removed", session_id, {"fdc_id": fdc_id, "count": count})


def log_recipe_viewed(session_id: Optional[str], recipe_id: str, recipe_name: str) -> None:
    log_event("recipe_viewed", session_id, {"recipe_id": recipe_id, "recipe_name": recipe_name})


def log_order_placed(
    session_id: Optional[str],
    order_id: int,
    store_to_visit: str,
    item_count: int,
) -> None:
    """
    Log an order_placed event.

    payload:
    {
        "order_id": 1700000000000,
        "store_to_visit": "Costco",
        "item_count": 4
    }
    """
    log_event("order_placed", session_id, {
        "order_id": order_id,
        "store_to_visit": store_to_visit,
        "item_count": item_count,
    })
