"""
Edamam recipe search connector.

This connector pages through the Edamam recipe search API and normalizes each
hit into a Recipe dict.

The connector:
- Sends GET {base_url}/search with q, from (offset), to (offset + limit - 1),
  app_id and app_key
- Maps hits[].recipe into Recipe, extracting recipe_id from the recipe URI
- Looks up a single recipe by id through the `r` parameter (full recipe URI)

Requires EDAMAM_APP_ID and EDAMAM_APP_KEY in .env or the environment.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from nutricart.errors import ConfigError
from nutricart.models import Ingredient, Recipe, RecipeNutrient, RECIPE_URI_MARKER, extract_recipe_id

from .base import DEFAULT_TIMEOUT_SECONDS, PagedQueryClient, get_json

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.edamam.com"
RECIPE_URI_PREFIX = "http://www.edamam.com/ontologies/edamam.owl#" + RECIPE_URI_MARKER


class EdamamRecipeConnector(PagedQueryClient):
    """
    Connector for the Edamam recipe search API.

    Args:
        app_id: Edamam application id (reads EDAMAM_APP_ID if not provided)
        app_key: Edamam application key (reads EDAMAM_APP_KEY if not provided)
        base_url: API root (reads EDAMAM_BASE_URL, defaults to https://api.edamam.com)
        timeout: HTTP timeout in seconds

    Raises:
        ConfigError: If the app id or key is missing
    """
    source = "edamam"

    def __init__(
        self,
        app_id: Optional[str] = None,
        app_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.app_id = app_id or os.getenv("EDAMAM_APP_ID")
        self.app_key = app_key or os.getenv("EDAMAM_APP_KEY")
        if not self.app_id or not self.app_key:
            raise ConfigError(
                "EDAMAM_APP_ID and EDAMAM_APP_KEY are not set. Please add them to your .env file "
                "at the project root:\n"
                "EDAMAM_APP_ID=your_app_id\n"
                "EDAMAM_APP_KEY=your_app_key"
            )
        self.base_url = (base_url or os.getenv("EDAMAM_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.timeout = timeout

    def _auth_params(self) -> Dict[str, str]:
        return {"app_id": self.app_id, "app_key": self.app_key}

    def fetch(self, query: str, offset: int, limit: int) -> List[Dict[str, Any]]:
        """
        Fetch recipes offset .. offset + limit - 1 for the query.

        Returns:
            List of Recipe dicts (see nutricart.models.Recipe)
        """
        if limit <= 0:
            return []

        params = {
            "q": query,
            "from": offset,
            "to": offset + limit - 1,
            **self._auth_params(),
        }
        logger.debug("Edamam search: q=%r from=%d to=%d", query, params["from"], params["to"])
        data = get_json(f"{self.base_url}/search", params=params, timeout=self.timeout)

        hits = data.get("hits", []) if isinstance(data, dict) else []
        recipes: List[Dict[str, Any]] = []
        for hit in hits:
            recipe = parse_recipe((hit or {}).get("recipe") or {})
            if recipe is not None:
                recipes.append(recipe.model_dump())

        logger.info("Edamam returned %d recipes for %r (offset %d)", len(recipes), query, offset)
        return recipes

    def get_recipe(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        """
        Look up one recipe by the id extracted from its URI.

        Returns:
            Recipe dict, or None if Edamam does not know the id
        """
        params = {"r": RECIPE_URI_PREFIX + recipe_id, **self._auth_params()}
        data = get_json(f"{self.base_url}/search", params=params, timeout=self.timeout)
        if not data:
            return None
        raw = data[0] if isinstance(data, list) else data
        recipe = parse_recipe(raw)
        return recipe.model_dump() if recipe else None


def parse_recipe(raw: Dict[str, Any]) -> Optional[Recipe]:
    """
    Map an Edamam recipe object into a Recipe.

    Returns:
        Recipe, or None if the object has no URI or label
    """
    uri = raw.get("uri") or ""
    label = raw.get("label") or ""
    if not uri or not label:
        logger.warning("Edamam recipe without uri or label, skipping: %s", str(raw)[:100])
        return None

    ingredients = []
    for item in raw.get("ingredients") or []:
        text = item.get("text") if isinstance(item, dict) else None
        if not text:
            continue
        ingredients.append(Ingredient(text=text, weight=item.get("weight"), food=item.get("food")))

    nutrients = []
    for code, entry in (raw.get("totalNutrients") or {}).items():
        if not isinstance(entry, dict) or not isinstance(entry.get("quantity"), (int, float)):
            continue
        nutrients.append(RecipeNutrient(
            code=code,
            label=entry.get("label") or code,
            quantity=max(0.0, float(entry["quantity"])),
            unit=entry.get("unit"),
        ))

    try:
        return Recipe(
            recipe_id=extract_recipe_id(uri),
            uri=uri,
            label=label,
            image=raw.get("image"),
            source=raw.get("source"),
            url=raw.get("url"),
            calories=float(raw.get("calories") or 0.0),
            servings=raw.get("yield"),
            ingredients=ingredients,
            ingredient_lines=list(raw.get("ingredientLines") or []),
            nutrients=nutrients,
        )
    except (ValidationError, TypeError, ValueError) as e:
        logger.warning("Edamam recipe %s could not be parsed: %s", uri, e)
        return None
