"""
Recipe, food, cart, profile, and order models for NutriCart.

This module defines the pydantic schemas used throughout the core library.
Connectors map raw API payloads into Recipe and FoodItem, then dump them to
dicts so that result slices stay JSON-serialisable all the way to the
Streamlit frontend.

# NOTE: Field names are snake_case. The USDA API uses camelCase (fdcId,
    brandOwner), which connectors translate; the models accept either through
    validation aliases so documents written by older clients still load.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Literal token in Edamam recipe URIs that precedes the recipe identifier
RECIPE_URI_MARKER = "recipe_"

NUTRIENT_COUNT = 33


def extract_recipe_id(uri: str) -> str:
    """
    Extract the recipe identifier from an Edamam recipe URI.

    The identifier is whatever follows the last occurrence of "recipe_".

    Examples:
        >>> extract_recipe_id("http://www.edamam.com/ontologies/edamam.owl#recipe_abc123")
        'abc123'
        >>> extract_recipe_id("no-marker")
        'no-marker'
    """
    index = uri.rfind(RECIPE_URI_MARKER)
    if index < 0:
        return uri
    return uri[index + len(RECIPE_URI_MARKER):]


class Ingredient(BaseModel):
    """Single ingredient line of a recipe."""
    text: str = Field(..., description="Ingredient line as written in the recipe")
    weight: Optional[float] = Field(None, ge=0, description="Weight in grams")
    food: Optional[str] = Field(None, description="Normalized food name")


class RecipeNutrient(BaseModel):
    """Total amount of one nutrient in a recipe (Edamam totalNutrients entry)."""
    code: str = Field(..., description="Edamam nutrient code, e.g. FAT")
    label: str
    quantity: float = Field(0.0, ge=0)
    unit: Optional[str] = None


class Recipe(BaseModel):
    """
    Recipe descriptor returned by the recipe search.

    Mirrors the `recipe` object of an Edamam hit, reduced to the fields the
    app shows on result cards and on the recipe details page.
    """
    recipe_id: str = Field(..., description="Identifier extracted from the URI")
    uri: str = Field(..., description="Full Edamam recipe URI")
    label: str = Field(..., description="Recipe title")
    image: Optional[str] = Field(None, description="Image URL")
    source: Optional[str] = Field(None, description="Publisher of the recipe")
    url: Optional[str] = Field(None, description="Link to the original recipe")
    calories: float = Field(0.0, ge=0, description="Total calories of the recipe")
    servings: Optional[float] = Field(None, ge=0, description="Number of servings (Edamam 'yield')")
    ingredients: List[Ingredient] = Field(default_factory=list)
    ingredient_lines: List[str] = Field(default_factory=list)
    nutrients: List[RecipeNutrient] = Field(default_factory=list, description="Totals for the whole recipe")

    @property
    def ingredient_count(self) -> int:
        return len(self.ingredients)

    @property
    def calories_rounded(self) -> int:
        """Calories floored to an int, as shown on result cards."""
        return int(self.calories)


class FoodNutrient(BaseModel):
    """Nutrient amount reported for a food item."""
    nutrient_id: int = Field(..., validation_alias=AliasChoices("nutrient_id", "nutrientId", "id"))
    name: Optional[str] = Field(None, validation_alias=AliasChoices("name", "nutrientName"))
    amount: float = Field(0.0, validation_alias=AliasChoices("amount", "value"))
    unit: Optional[str] = Field(None, validation_alias=AliasChoices("unit", "unitName"))

    model_config = ConfigDict(populate_by_name=True)


class FoodItem(BaseModel):
    """Grocery item from the USDA FoodData Central search."""
    fdc_id: int = Field(..., validation_alias=AliasChoices("fdc_id", "fdcId"))
    description: str = Field(..., description="Food description")
    brand_owner: Optional[str] = Field(None, validation_alias=AliasChoices("brand_owner", "brandOwner"))
    data_type: Optional[str] = Field(None, validation_alias=AliasChoices("data_type", "dataType"))
    food_nutrients: List[FoodNutrient] = Field(
        default_factory=list,
        validation_alias=AliasChoices("food_nutrients", "foodNutrients"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @property
    def display_name(self) -> str:
        """Description followed by the brand owner when there is one."""
        if self.brand_owner:
            return f"{self.description} - {self.brand_owner}"
        return self.description


class CartItem(BaseModel):
    """Food item in a cart, with the number of times it was added."""
    fdc_id: int = Field(..., validation_alias=AliasChoices("fdc_id", "fdcId"))
    description: str
    brand_owner: Optional[str] = Field(None, validation_alias=AliasChoices("brand_owner", "brandOwner"))
    quantity: int = Field(1, ge=1, description="Quantity in cart")
    food_nutrients: List[FoodNutrient] = Field(
        default_factory=list,
        validation_alias=AliasChoices("food_nutrients", "foodNutrients"),
    )

    model_config = ConfigDict(populate_by_name=True)


class DailyValue(BaseModel):
    """Personal daily value for one of the 33 tracked nutrients."""
    id: int = Field(..., ge=1, le=NUTRIENT_COUNT)
    value: float = Field(..., gt=0)


class OrderItem(BaseModel):
    """Line of a placed order."""
    fdc_id: int = Field(..., validation_alias=AliasChoices("fdc_id", "fdcId"))
    description: str
    brand_owner: Optional[str] = Field(None, validation_alias=AliasChoices("brand_owner", "brandOwner"))
    quantity: int = Field(1, ge=1)

    model_config = ConfigDict(populate_by_name=True)


class Order(BaseModel):
    """Placed order with its destination store."""
    ordered_at: datetime = Field(..., description="UTC timestamp when the order was placed")
    store_to_visit: str = Field(..., min_length=1)
    cart: List[OrderItem] = Field(default_factory=list)

    @field_validator("ordered_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def order_id(self) -> int:
        """Millisecond timestamp used as the order's identifier in URLs."""
        return int(self.ordered_at.timestamp() * 1000)


class UserProfile(BaseModel):
    """Document stored per user in the profile store."""
    user_id: str = Field(..., min_length=1)
    daily_values: List[DailyValue] = Field(default_factory=list)
    cart: List[Dict[str, Any]] = Field(default_factory=list, description="Raw cart entries, one per add")
    order_history: List[Order] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")
