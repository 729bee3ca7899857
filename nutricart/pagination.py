"""
Paged search controller with a sliding window of page-number controls.

This module drives the recipe and grocery searches:
- PageWindowController owns the query state (query text, page size, total
  pages, active page) of one search session
- Every navigation issues exactly one fetch against a PagedQueryClient
- The visible pagination controls (PageWindow) are rebuilt from scratch after
  every successful fetch, from (active_page, total_pages) only

Window layout for total_pages > 5:
- near the start (active < 4):      1 2 3 4 5 >
- near the end (active >= total-2): < t-4 t-3 t-2 t-1 t
- in the middle:                    << < 1 ... a-2 a-1 a a+1 a+2 ... t > >>

"<<" and ">>" jump five pages back/forward and are no-ops when the jump
would leave the valid page range.

Overlapping requests follow a last-request-wins policy: each fetch is stamped
with a sequence number, and a response that arrives after a newer request was
issued is discarded.

Flow: UI event -> navigate(target) -> client.fetch(query, offset, limit) -> new state + window
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from .connectors.base import PagedQueryClient
from .errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_SEARCH_LIMIT = 100
# Pages skipped by the First/Last (<< / >>) controls
JUMP_SIZE = 5
# Numbered controls shown in the sliding window
WINDOW_SIZE = 5


class ControlKind(str, Enum):
    PAGE = "page"
    FIRST = "first"
    PREV = "prev"
    NEXT = "next"
    LAST = "last"
    ELLIPSIS = "ellipsis"


class NavTarget(str, Enum):
    """Navigation targets accepted by PageWindowController.navigate()."""
    FIRST = "first"
    PREV = "prev"
    PAGE = "page"
    NEXT = "next"
    LAST = "last"

    @classmethod
    def parse(cls, value: "str | NavTarget") -> "NavTarget":
        """
        Parse a target from its string form (case-insensitive).

        Raises:
            ValueError: If value is not one of first, prev, page, next, last
        """
        if isinstance(value, NavTarget):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Invalid navigation target: '{value}'. Valid targets: {valid}") from None


@dataclass(frozen=True)
class PageControl:
    """One entry of the rendered pagination bar."""
    kind: ControlKind
    page: Optional[int] = None
    active: bool = False
    enabled: bool = True

    @classmethod
    def number(cls, page: int, active_page: int) -> "PageControl":
        return cls(ControlKind.PAGE, page=page, active=page == active_page)

    @classmethod
    def ellipsis(cls) -> "PageControl":
        return cls(ControlKind.ELLIPSIS, enabled=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "page": self.page,
            "active": self.active,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class QueryState:
    """Pagination state of the current query."""
    query_text: str
    page_size: int = DEFAULT_PAGE_SIZE
    total_pages: int = 0
    active_page: int = 1

    @property
    def offset(self) -> int:
        return (self.active_page - 1) * self.page_size


@dataclass
class NavigationResult:
    """
    Outcome of submit_query() or navigate().

    status is one of:
    - "ok": the page was fetched and the state moved to it
    - "noop": the target was invalid or out of range; nothing was fetched
    - "error": the fetch failed; the previous results and window are kept
    - "stale": a newer request was issued while this one was in flight
    """
    status: str
    state: Optional[QueryState]
    results: List[Dict[str, Any]] = field(default_factory=list)
    window: List[PageControl] = field(default_factory=list)
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "query": self.state.query_text if self.state else None,
            "active_page": self.state.active_page if self.state else None,
            "total_pages": self.state.total_pages if self.state else 0,
            "page_size": self.state.page_size if self.state else None,
            "results": list(self.results),
            "window": [control.to_dict() for control in self.window],
            "error": self.error.to_dict() if self.error else None,
        }


def compute_total_pages(search_limit: int, page_size: int) -> int:
    """Fixed page count for a query: search_limit // page_size."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return max(0, search_limit // page_size)


def resolve_target(
    target: NavTarget,
    active_page: int,
    total_pages: int,
    page: Optional[int] = None,
    jump: int = JUMP_SIZE,
) -> Optional[int]:
    """
    Compute the page a navigation target leads to.

    Returns:
        The new page number, or None when the navigation is a no-op.
    """
    if total_pages <= 0:
        return None

    if target is NavTarget.PAGE:
        new_page = page
    elif target is NavTarget.NEXT:
        new_page = active_page + 1
    elif target is NavTarget.PREV:
        new_page = active_page - 1
    elif target is NavTarget.LAST:
        new_page = active_page + jump
    elif target is NavTarget.FIRST:
        new_page = active_page - jump
    else:
        return None

    if new_page is None or new_page < 1 or new_page > total_pages:
        return None
    return new_page


def build_page_window(active_page: int, total_pages: int, jump: int = JUMP_SIZE) -> List[PageControl]:
    """
    Build the pagination controls for (active_page, total_pages).

    Navigation controls carry enabled=False when using them would be a no-op
    (e.g. ">>" on page 7 of 10).
    """
    if total_pages <= 0:
        return []

    def nav(kind: ControlKind, target: NavTarget) -> PageControl:
        enabled = resolve_target(target, active_page, total_pages, jump=jump) is not None
        return PageControl(kind, enabled=enabled)

    if total_pages <= WINDOW_SIZE:
        return [PageControl.number(n, active_page) for n in range(1, total_pages + 1)]

    if active_page < 4:
        window = [PageControl.number(n, active_page) for n in range(1, WINDOW_SIZE + 1)]
        window.append(nav(ControlKind.NEXT, NavTarget.NEXT))
        return window

    if active_page >= total_pages - 2:
        window = [nav(ControlKind.PREV, NavTarget.PREV)]
        window.extend(
            PageControl.number(n, active_page)
            for n in range(total_pages - WINDOW_SIZE + 1, total_pages + 1)
        )
        return window

    window = [
        nav(ControlKind.FIRST, NavTarget.FIRST),
        nav(ControlKind.PREV, NavTarget.PREV),
        PageControl.number(1, active_page),
        PageControl.ellipsis(),
    ]
    window.extend(PageControl.number(n, active_page) for n in range(active_page - 2, active_page + 3))
    window.extend([
        PageControl.ellipsis(),
        PageControl.number(total_pages, active_page),
        nav(ControlKind.NEXT, NavTarget.NEXT),
        nav(ControlKind.LAST, NavTarget.LAST),
    ])
    return window


class PageWindowController:
    """
    Controller for one paged search session.

    Args:
        client: Paged-query collaborator used to fetch result slices
        page_size: Results per page (default: 10)
        search_limit: Ceiling on results per query; total_pages is
                      search_limit // page_size (default: 100)
        jump: Pages skipped by the "<<" and ">>" controls (default: 5)
    """

    def __init__(
        self,
        client: PagedQueryClient,
        page_size: int = DEFAULT_PAGE_SIZE,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        jump: int = JUMP_SIZE,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.client = client
        self.page_size = page_size
        self.search_limit = search_limit
        self.jump = jump

        self.state: Optional[QueryState] = None
        self.results: List[Dict[str, Any]] = []
        self.window: List[PageControl] = []
        self.last_error: Optional[FetchError] = None

        self._lock = threading.Lock()
        self._latest_request = 0

    def submit_query(self, text: str) -> NavigationResult:
        """
        Start a new search: page 1 of a fixed number of pages.

        The previous query's state is only replaced if the first page is
        fetched successfully.
        """
        new_state = QueryState(
            query_text=text,
            page_size=self.page_size,
            total_pages=compute_total_pages(self.search_limit, self.page_size),
            active_page=1,
        )
        logger.info("Search submitted: query=%r total_pages=%d", text, new_state.total_pages)
        return self._fetch_into(new_state)

    def navigate(self, target: "NavTarget | str", page: Optional[int] = None) -> NavigationResult:
        """
        Move to the page selected by target.

        Args:
            target: first, prev, page, next, or last
            page: Page number, required when target is "page"

        Returns:
            NavigationResult; "noop" when there is no query yet or the target
            leads outside [1, total_pages]
        """
        target = NavTarget.parse(target)
        with self._lock:
            state = self.state

        if state is None:
            logger.debug("navigate(%s) ignored: no query submitted yet", target.value)
            return self._snapshot("noop")

        new_page = resolve_target(target, state.active_page, state.total_pages, page=page, jump=self.jump)
        if new_page is None:
            logger.debug(
                "navigate(%s, page=%r) is a no-op at page %d of %d",
                target.value, page, state.active_page, state.total_pages,
            )
            return self._snapshot("noop")

        return self._fetch_into(replace(state, active_page=new_page))

    def _fetch_into(self, new_state: QueryState) -> NavigationResult:
        with self._lock:
            self._latest_request += 1
            request_id = self._latest_request

        offset = new_state.offset
        logger.debug(
            "Fetching page %d: query=%r offset=%d limit=%d (request %d)",
            new_state.active_page, new_state.query_text, offset, new_state.page_size, request_id,
        )
        try:
            items = self.client.fetch(new_state.query_text, offset, new_state.page_size)
        except FetchError as e:
            with self._lock:
                if request_id != self._latest_request:
                    logger.debug("Discarding failed response of superseded request %d", request_id)
                    return self._snapshot("stale", locked=True)
                self.last_error = e
            logger.warning("Fetch failed for page %d of %r: %s", new_state.active_page, new_state.query_text, e)
            return self._snapshot("error", error=e)

        with self._lock:
            if request_id != self._latest_request:
                logger.debug("Discarding response of superseded request %d", request_id)
                return self._snapshot("stale", locked=True)
            self.state = new_state
            self.results = list(items or [])
            self.window = build_page_window(new_state.active_page, new_state.total_pages, jump=self.jump)
            self.last_error = None

        logger.info(
            "Page %d/%d loaded for %r: %d results",
            new_state.active_page, new_state.total_pages, new_state.query_text, len(self.results),
        )
        return self._snapshot("ok")

    def _snapshot(self, status: str, error: Optional[FetchError] = None, locked: bool = False) -> NavigationResult:
        if locked:
            return NavigationResult(status, self.state, list(self.results), list(self.window), error)
        with self._lock:
            return NavigationResult(status, self.state, list(self.results), list(self.window), error)
