"""
Tests for the Edamam and USDA connectors using mocked HTTP calls.

These tests patch requests.get to avoid making real API calls during testing.
The tests verify that:
- Connectors read their credentials from environment variables
- offset/limit are mapped onto each API's paging parameters
- Raw API payloads are normalized into Recipe / FoodItem dicts
- HTTP failures are classified into NetworkError and UpstreamError
"""

import os
from unittest.mock import Mock, patch

import pytest
import requests

from nutricart.connectors.base import get_json
from nutricart.connectors.edamam_connector import EdamamRecipeConnector, RECIPE_URI_PREFIX, parse_recipe
from nutricart.connectors.usda_connector import UsdaFoodConnector, parse_food
from nutricart.errors import ConfigError, NetworkError, UpstreamError
from nutricart.models import extract_recipe_id

EDAMAM_ENV = {"EDAMAM_APP_ID": "test-id", "EDAMAM_APP_KEY": "test-key"}


def mock_response(json_data=None, status_code=200, reason="OK", text=""):
    """Build a Mock that behaves like a requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.text = text
    response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    else:
        response.raise_for_status.return_value = None
    return response


def edamam_hit(label: str, recipe_id: str) -> dict:
    return {
        "recipe": {
            "uri": f"http://www.edamam.com/ontologies/edamam.owl#recipe_{recipe_id}",
            "label": label,
            "image": f"https://img.example.com/{recipe_id}.jpg",
            "source": "Serious Eats",
            "url": f"https://example.com/{recipe_id}",
            "yield": 4.0,
            "calories": 1234.56,
            "ingredientLines": ["1 chicken", "2 cloves garlic"],
            "ingredients": [
                {"text": "1 chicken", "weight": 1200.0, "food": "chicken"},
                {"text": "2 cloves garlic", "weight": 6.0, "food": "garlic"},
            ],
        }
    }


class TestExtractRecipeId:
    """Identifier extraction from Edamam URIs."""

    def test_basic(self):
        assert extract_recipe_id("http://www.edamam.com/ontologies/edamam.owl#recipe_abc123") == "abc123"

    def test_last_occurrence_wins(self):
        assert extract_recipe_id("http://x/recipe_one#recipe_two") == "two"

    def test_no_marker_returns_input(self):
        assert extract_recipe_id("http://example.com/no-id") == "http://example.com/no-id"

    def test_marker_at_end(self):
        assert extract_recipe_id("http://x#recipe_") == ""


class TestEdamamRecipeConnector:
    """Tests for the Edamam recipe search connector."""

    @patch.dict(os.environ, EDAMAM_ENV)
    def test_initialization(self):
        """Connector reads app id and key from the environment."""
        connector = EdamamRecipeConnector()
        assert connector.app_id == "test-id"
        assert connector.app_key == "test-key"
        assert connector.base_url == "https://api.edamam.com"
        assert connector.source == "edamam"

    @patch.dict(os.environ, {}, clear=True)
    def test_initialization_missing_credentials(self):
        """Missing credentials raise ConfigError (a RuntimeError)."""
        with pytest.raises(ConfigError, match="EDAMAM_APP_ID"):
            EdamamRecipeConnector()
        with pytest.raises(RuntimeError):
            EdamamRecipeConnector(app_id="only-id")

    @patch.dict(os.environ, {**EDAMAM_ENV, "EDAMAM_BASE_URL": "http://edamam.local/"})
    def test_custom_base_url(self):
        assert EdamamRecipeConnector().base_url == "http://edamam.local"

    @patch.dict(os.environ, EDAMAM_ENV)
    @patch("nutricart.connectors.base.requests.get")
    def test_fetch_maps_offset_and_limit(self, mock_get):
        """offset 20 / limit 10 is sent as from=20, to=29."""
        mock_get.return_value = mock_response({"hits": []})

        EdamamRecipeConnector().fetch("chicken", 20, 10)

        url = mock_get.call_args.args[0]
        params = mock_get.call_args.kwargs["params"]
        assert url == "https://api.edamam.com/search"
        assert params["q"] == "chicken"
        assert params["from"] == 20
        assert params["to"] == 29
        assert params["app_id"] == "test-id"
        assert params["app_key"] == "test-key"

    @patch.dict(os.environ, EDAMAM_ENV)
    @patch("nutricart.connectors.base.requests.get")
    def test_fetch_normalizes_hits(self, mock_get):
        """Hits are mapped into Recipe dicts with the id extracted from the URI."""
        mock_get.return_value = mock_response({"hits": [edamam_hit("Roast Chicken", "abc"), edamam_hit("Soup", "def")]})

        recipes = EdamamRecipeConnector().fetch("chicken", 0, 10)

        assert [r["recipe_id"] for r in recipes] == ["abc", "def"]
        first = recipes[0]
        assert first["label"] == "Roast Chicken"
        assert first["calories"] == pytest.approx(1234.56)
        assert first["servings"] == 4.0
        assert first["ingredients"][0] == {"text": "1 chicken", "weight": 1200.0, "food": "chicken"}
        assert first["ingredient_lines"] == ["1 chicken", "2 cloves garlic"]

    @patch.dict(os.environ, EDAMAM_ENV)
    @patch("nutricart.connectors.base.requests.get")
    def test_fetch_skips_invalid_hits(self, mock_get):
        mock_get.return_value = mock_response({"hits": [{"recipe": {"label": "No URI"}}, edamam_hit("Ok", "1")]})
        recipes = EdamamRecipeConnector().fetch("x", 0, 10)
        assert [r["label"] for r in recipes] == ["Ok"]

    @patch.dict(os.environ, EDAMAM_ENV)
    @patch("nutricart.connectors.base.requests.get")
    def test_fetch_zero_limit(self, mock_get):
        assert EdamamRecipeConnector().fetch("x", 0, 0) == []
        mock_get.assert_not_called()

    @patch.dict(os.environ, EDAMAM_ENV)
    @patch("nutricart.connectors.base.requests.get")
    def test_get_recipe_uses_full_uri(self, mock_get):
        """Recipe lookup sends the full URI in the r parameter."""
        mock_get.return_value = mock_response([edamam_hit("Roast Chicken", "abc")["recipe"]])

        recipe = EdamamRecipeConnector().get_recipe("abc")

        assert mock_get.call_args.kwargs["params"]["r"] == RECIPE_URI_PREFIX + "abc"
        assert recipe["recipe_id"] == "abc"

    @patch.dict(os.environ, EDAMAM_ENV)
    @patch("nutricart.connectors.base.requests.get")
    def test_get_recipe_unknown(self, mock_get):
        mock_get.return_value = mock_response([])
        assert EdamamRecipeConnector().get_recipe("missing") is None

    def test_parse_recipe_without_label(self):
        assert parse_recipe({"uri": "http://x#recipe_1"}) is None

    def test_parse_recipe_nutrient_totals(self):
        """totalNutrients entries become nutrients; entries without a numeric quantity are skipped."""
        raw = dict(edamam_hit("Roast Chicken", "abc")["recipe"])
        raw["totalNutrients"] = {
            "FAT": {"label": "Fat", "quantity": 85.25, "unit": "g"},
            "NA": {"label": "Sodium", "quantity": 950, "unit": "mg"},
            "CHOCDF": {"label": "Carbs", "quantity": None, "unit": "g"},
            "SUGAR": "n/a",
        }

        recipe = parse_recipe(raw)

        assert [n.model_dump() for n in recipe.nutrients] == [
            {"code": "FAT", "label": "Fat", "quantity": 85.25, "unit": "g"},
            {"code": "NA", "label": "Sodium", "quantity": 950.0, "unit": "mg"},
        ]

    def test_parse_recipe_without_nutrients(self):
        assert parse_recipe(edamam_hit("Soup", "def")["recipe"]).nutrients == []


class TestUsdaFoodConnector:
    """Tests for the USDA FoodData Central connector."""

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults_to_demo_key(self):
        connector = UsdaFoodConnector()
        assert connector.api_key == "DEMO_KEY"
        assert connector.base_url == "https://api.nal.usda.gov/fdc/v1"

    @patch("nutricart.connectors.base.requests.get")
    def test_fetch_maps_offset_to_page_number(self, mock_get):
        """offset 30 / limit 10 is page 4 of size 10."""
        mock_get.return_value = mock_response({"foods": []})

        UsdaFoodConnector(api_key="k").fetch("milk", 30, 10)

        url = mock_get.call_args.args[0]
        params = mock_get.call_args.kwargs["params"]
        assert url == "https://api.nal.usda.gov/fdc/v1/foods/search"
        assert params == {"query": "milk", "pageSize": 10, "pageNumber": 4, "api_key": "k"}

    @patch("nutricart.connectors.base.requests.get")
    def test_fetch_normalizes_foods(self, mock_get):
        mock_get.return_value = mock_response({
            "foods": [
                {
                    "fdcId": 2346404,
                    "description": "OAT MILK",
                    "brandOwner": "Oatly Inc.",
                    "dataType": "Branded",
                    "foodNutrients": [
                        {"nutrientId": 1004, "nutrientName": "Total lipid (fat)", "value": 2.92, "unitName": "G"},
                    ],
                },
                {"description": "no id"},
            ]
        })

        foods = UsdaFoodConnector(api_key="k").fetch("milk", 0, 10)

        assert len(foods) == 1
        food = foods[0]
        assert food["fdc_id"] == 2346404
        assert food["brand_owner"] == "Oatly Inc."
        assert food["data_type"] == "Branded"
        assert food["food_nutrients"] == [
            {"nutrient_id": 1004, "name": "Total lipid (fat)", "amount": 2.92, "unit": "G"}
        ]

    @patch("nutricart.connectors.base.requests.get")
    def test_get_food(self, mock_get):
        mock_get.return_value = mock_response({"fdcId": 171688, "description": "Apples", "foodNutrients": []})
        food = UsdaFoodConnector(api_key="k").get_food(171688)
        assert mock_get.call_args.args[0] == "https://api.nal.usda.gov/fdc/v1/food/171688"
        assert food["description"] == "Apples"

    def test_parse_food_nested_nutrients(self):
        """The details endpoint nests nutrient metadata under "nutrient"."""
        food = parse_food({
            "fdcId": 1,
            "description": "Apples",
            "foodNutrients": [
                {"nutrient": {"id": 1079, "name": "Fiber", "unitName": "g"}, "amount": 2.4},
                {"nutrient": {"name": "no id"}, "amount": 1.0},
            ],
        })
        assert len(food.food_nutrients) == 1
        assert food.food_nutrients[0].nutrient_id == 1079
        assert food.food_nutrients[0].amount == 2.4


class TestGetJsonErrors:
    """Failure classification of the shared HTTP helper."""

    @patch("nutricart.connectors.base.requests.get")
    def test_http_error_becomes_upstream_error(self, mock_get):
        mock_get.return_value = mock_response({"message": "limit"}, status_code=429, reason="Too Many Requests")

        with pytest.raises(UpstreamError) as exc_info:
            get_json("http://api.example.com/search")

        error = exc_info.value
        assert error.status == 429
        assert error.status_text == "Too Many Requests"
        assert error.body == {"message": "limit"}
        assert str(error) == "429 - Too Many Requests"
        assert error.to_dict()["kind"] == "upstream_error"

    @patch("nutricart.connectors.base.requests.get")
    def test_non_json_error_body_is_text(self, mock_get):
        response = mock_response(status_code=500, reason="Internal Server Error", text="boom")
        response.json.side_effect = ValueError("no json")
        mock_get.return_value = response

        with pytest.raises(UpstreamError) as exc_info:
            get_json("http://api.example.com/search")
        assert exc_info.value.body == "boom"

    @patch("nutricart.connectors.base.requests.get")
    def test_connection_error_becomes_network_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(NetworkError):
            get_json("http://api.example.com/search")

    @patch("nutricart.connectors.base.requests.get")
    def test_timeout_becomes_network_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout()
        with pytest.raises(NetworkError, match="timed out"):
            get_json("http://api.example.com/search", timeout=3)

    @patch("nutricart.connectors.base.requests.get")
    def test_invalid_json_is_upstream_error(self, mock_get):
        response = mock_response(status_code=200, text="<html>")
        response.json.side_effect = ValueError("no json")
        mock_get.return_value = response
        with pytest.raises(UpstreamError, match="Invalid JSON"):
            get_json("http://api.example.com/search")
