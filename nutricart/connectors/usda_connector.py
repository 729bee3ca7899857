"""
USDA FoodData Central connector for grocery item search.

This connector pages through the FoodData Central /foods/search endpoint and
normalizes each food into a FoodItem dict.

The API pages by page number, so the offset/limit pair requested by the
controller is mapped to pageNumber = offset // limit + 1 and pageSize = limit.

USDA_API_KEY defaults to the public DEMO_KEY, which is heavily rate limited.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from nutricart.models import FoodItem

from .base import DEFAULT_TIMEOUT_SECONDS, PagedQueryClient, get_json

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.nal.usda.gov/fdc/v1"
DEFAULT_API_KEY = "DEMO_KEY"


class UsdaFoodConnector(PagedQueryClient):
    """
    Connector for the USDA FoodData Central API.

    Args:
        api_key: FoodData Central key (reads USDA_API_KEY, defaults to DEMO_KEY)
        base_url: API root (reads USDA_BASE_URL)
        timeout: HTTP timeout in seconds
    """
    source = "usda"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.api_key = api_key or os.getenv("USDA_API_KEY", DEFAULT_API_KEY)
        self.base_url = (base_url or os.getenv("USDA_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.timeout = timeout

    def fetch(self, query: str, offset: int, limit: int) -> List[Dict[str, Any]]:
        """
        Fetch foods offset .. offset + limit - 1 for the query.

        Returns:
            List of FoodItem dicts (see nutricart.models.FoodItem)
        """
        if limit <= 0:
            return []

        params = {
            "query": query,
            "pageSize": limit,
            "pageNumber": offset // limit + 1,
            "api_key": self.api_key,
        }
        logger.debug("USDA search: query=%r pageNumber=%d pageSize=%d", query, params["pageNumber"], limit)
        data = get_json(f"{self.base_url}/foods/search", params=params, timeout=self.timeout)

        foods = data.get("foods", []) if isinstance(data, dict) else []
        items: List[Dict[str, Any]] = []
        for raw in foods:
            food = parse_food(raw)
            if food is not None:
                items.append(food.model_dump())

        logger.info("USDA returned %d foods for %r (offset %d)", len(items), query, offset)
        return items

    def get_food(self, fdc_id: int) -> Optional[Dict[str, Any]]:
        """Fetch the details of one food by its FDC id."""
        data = get_json(f"{self.base_url}/food/{fdc_id}", params={"api_key": self.api_key}, timeout=self.timeout)
        food = parse_food(data or {})
        return food.model_dump() if food else None


def parse_food(raw: Dict[str, Any]) -> Optional[FoodItem]:
    """
    Map a FoodData Central food object into a FoodItem.

    Search results carry flat nutrient entries (nutrientId, nutrientName,
    value, unitName); the details endpoint nests them under "nutrient" with
    the amount alongside. Both shapes are accepted.
    """
    nutrients = []
    for entry in raw.get("foodNutrients") or []:
        if not isinstance(entry, dict):
            continue
        nested = entry.get("nutrient")
        if isinstance(nested, dict):
            entry = {
                "nutrientId": nested.get("id"),
                "nutrientName": nested.get("name"),
                "unitName": nested.get("unitName"),
                "value": entry.get("amount", 0.0),
            }
        if entry.get("nutrientId") is None:
            continue
        nutrients.append(entry)

    try:
        return FoodItem.model_validate({**raw, "foodNutrients": nutrients})
    except ValidationError as e:
        logger.warning("USDA food could not be parsed, skipping: %s (%s)", str(raw)[:100], e)
        return None
