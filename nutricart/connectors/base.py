"""
Base connector abstract class for paged nutrition-API integrations.

Every search source (Edamam recipes, USDA foods) implements PagedQueryClient so
that PageWindowController can page through it without knowing which API it
talks to.

All connectors must:
- Provide fetch(query, offset, limit) returning one result slice as a list of dicts
- Raise NetworkError when no response is received
- Raise UpstreamError when the API answers with an error status
- Hold no pagination state of their own
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from nutricart.errors import NetworkError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15


class PagedQueryClient(ABC):
    """
    Abstract base class for all paged search connectors.

    Attributes:
        source: Short identifier of the upstream API (e.g. "edamam", "usda")
    """
    source: str

    @abstractmethod
    def fetch(self, query: str, offset: int, limit: int) -> List[Dict[str, Any]]:
        """
        Fetch one slice of search results.

        Args:
            query: Search text, forwarded as-is (may be empty)
            offset: Zero-based index of the first result
            limit: Maximum number of results in the slice

        Returns:
            Ordered list of normalized result dicts

        Raises:
            NetworkError: If the API could not be reached
            UpstreamError: If the API returned a non-2xx status
        """
        pass


def get_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """
    GET a JSON document, classifying failures into NetworkError/UpstreamError.

    Args:
        url: Absolute URL
        params: Query string parameters
        timeout: Seconds to wait for the response

    Returns:
        Parsed JSON body
    """
    try:
        response = requests.get(url, params=params, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        raise NetworkError(f"Request to {url} timed out after {timeout}s") from e
    except requests.exceptions.ConnectionError as e:
        raise NetworkError(f"Could not connect to {url}: {e}") from e
    except requests.exceptions.HTTPError as e:
        raise _upstream_error(e.response) from e
    except requests.exceptions.RequestException as e:
        raise NetworkError(f"Request to {url} failed: {e}") from e

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(response.status_code, "Invalid JSON response", response.text) from e


def _upstream_error(response: Optional[requests.Response]) -> UpstreamError:
    if response is None:
        return UpstreamError(0, "No response")
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text
    logger.debug("Upstream error %s %s: %s", response.status_code, response.reason, str(body)[:200])
    return UpstreamError(response.status_code, response.reason or "", body)
