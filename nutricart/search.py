"""
Search sessions: one PageWindowController per browser session and search kind.

This module provides the glue between the HTTP layer and the pagination
controller:
- Maps search kinds ("recipes", "foods") to their connector classes
- Lazily creates a controller per (session_id, kind), so every browser tab
  pages through its own query
- Exposes submit/navigate helpers that return plain dicts for the API

Search flow: Streamlit -> POST /recipes/search -> submit_search() -> controller.submit_query() -> connector.fetch()
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from .connectors.base import DEFAULT_TIMEOUT_SECONDS, PagedQueryClient
from .connectors.edamam_connector import EdamamRecipeConnector
from .connectors.usda_connector import UsdaFoodConnector
from .pagination import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SEARCH_LIMIT,
    NavigationResult,
    NavTarget,
    PageWindowController,
)

logger = logging.getLogger(__name__)

SEARCH_KINDS = ("recipes", "foods")


# Using a function to get the classes dynamically so that patches in tests work correctly
def _get_connector_map() -> Dict[str, Callable[..., PagedQueryClient]]:
    return {
        "recipes": EdamamRecipeConnector,
        "foods": UsdaFoodConnector,
    }


class SearchSessionStore:
    """
    Registry of PageWindowControllers keyed by (session_id, kind).

    Args:
        page_size: Results per page for new controllers
        search_limit: Result ceiling per query for new controllers
        timeout: HTTP timeout passed to the connectors
    """

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.page_size = page_size
        self.search_limit = search_limit
        self.timeout = timeout
        self._controllers: Dict[Tuple[str, str], PageWindowController] = {}
        self._lock = threading.Lock()

    def get_controller(self, session_id: str, kind: str) -> PageWindowController:
        """
        Return the controller for a session, creating it on first use.

        Raises:
            ValueError: If kind is not a known search kind
            ConfigError: If the connector for kind is not configured
        """
        if kind not in SEARCH_KINDS:
            raise ValueError(f"Invalid search kind: '{kind}'. Valid kinds: {', '.join(SEARCH_KINDS)}")

        key = (session_id, kind)
        with self._lock:
            controller = self._controllers.get(key)
            if controller is None:
                connector = _get_connector_map()[kind](timeout=self.timeout)
                controller = PageWindowController(
                    connector,
                    page_size=self.page_size,
                    search_limit=self.search_limit,
                )
                self._controllers[key] = controller
                logger.debug("Created %s search controller for session %s", kind, session_id)
            return controller

    def peek(self, session_id: str, kind: str) -> Optional[PageWindowController]:
        """Return the controller for a session without creating one."""
        with self._lock:
            return self._controllers.get((session_id, kind))

    def reset(self, session_id: Optional[str] = None) -> None:
        """Drop the controllers of one session, or of all sessions."""
        with self._lock:
            if session_id is None:
                self._controllers.clear()
            else:
                for key in [k for k in self._controllers if k[0] == session_id]:
                    del self._controllers[key]


def submit_search(store: SearchSessionStore, session_id: str, kind: str, query: str) -> NavigationResult:
    """Submit a new query for a session's search of the given kind."""
    result = store.get_controller(session_id, kind).submit_query(query)
    logger.info("Search %s for session %s: query=%r status=%s", kind, session_id, query, result.status)
    return result


def navigate_search(
    store: SearchSessionStore,
    session_id: str,
    kind: str,
    target: "NavTarget | str",
    page: Optional[int] = None,
) -> NavigationResult:
    """Navigate the session's search of the given kind."""
    result = store.get_controller(session_id, kind).navigate(target, page=page)
    logger.info(
        "Navigate %s for session %s: target=%s page=%r status=%s",
        kind, session_id, NavTarget.parse(target).value, page, result.status,
    )
    return result


def current_page(store: SearchSessionStore, session_id: str, kind: str) -> Dict[str, Any]:
    """Current state of a session's search, without fetching."""
    controller = store.peek(session_id, kind)
    if controller is None or controller.state is None:
        return NavigationResult("noop", None).to_dict()
    return NavigationResult(
        "ok", controller.state, list(controller.results), list(controller.window), controller.last_error,
    ).to_dict()
