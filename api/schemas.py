"""
Pydantic schemas for FastAPI request and response models.

This module defines the Pydantic models used for API request validation and
response serialization. These schemas ensure type safety and automatic API
documentation generation.

The schemas include:
- SearchRequest / NavigateRequest: Inputs of the paged recipe and grocery searches
- SearchPageView: One page of results plus the pagination window to render
- CartItemInput / CartView: Cart operations and the grouped cart
- DailyValuesInput / NutrientChartResponse: Daily values and the nutrient chart
- OrderInput / OrderOut / OrderListResponse: Order placement and history
- StoreOut: Grocery store directory entry

# NOTE: Result items inside SearchPageView are plain dicts. They are produced by
    Recipe.model_dump() / FoodItem.model_dump() in nutricart.models and are
    passed through untouched so both search kinds share one response model.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from nutricart.models import CartItem, DailyValue, FoodNutrient, OrderItem, UserProfile


class SearchRequest(BaseModel):
    """Input model for submitting a new search query."""
    q: str = Field(..., description="Search query string (e.g., 'chicken', 'oat milk'); may be empty")

    model_config = ConfigDict(json_schema_extra={"example": {"q": "chicken"}})


class NavigateRequest(BaseModel):
    """
    Input model for moving through the pages of the current query.

    target is one of: first (<<, five pages back), prev, page, next,
    last (>>, five pages forward). page is required when target is "page".
    """
    target: str = Field(..., description="Navigation target: first, prev, page, next, or last")
    page: Optional[int] = Field(None, description="Page number (only for target 'page'); out-of-range pages are no-ops")

    model_config = ConfigDict(json_schema_extra={"example": {"target": "page", "page": 3}})


class PageControlOut(BaseModel):
    """One control of the pagination bar."""
    kind: str = Field(..., description="page, first, prev, next, last, or ellipsis")
    page: Optional[int] = Field(None, description="Page number for numbered controls")
    active: bool = False
    enabled: bool = True


class FetchErrorOut(BaseModel):
    """Upstream or network failure of the last fetch."""
    kind: str = Field(..., description="network_error or upstream_error")
    message: str
    status: Optional[int] = Field(None, description="HTTP status returned by the upstream API")
    status_text: Optional[str] = None
    body: Optional[Any] = None


class SearchPageView(BaseModel):
    """
    Response model of the search and navigate endpoints.

    status is one of:
    - "ok": the requested page was fetched
    - "noop": the navigation target was out of range; nothing changed
    - "error": the fetch failed; results and window are the previous page's
    - "stale": a newer request overtook this one; results are the current page's
    """
    status: str
    query: Optional[str] = None
    active_page: Optional[int] = None
    total_pages: int = 0
    page_size: Optional[int] = None
    results: List[Dict[str, Any]] = Field(default_factory=list)
    window: List[PageControlOut] = Field(default_factory=list)
    error: Optional[FetchErrorOut] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "ok",
                "query": "chicken",
                "active_page": 1,
                "total_pages": 10,
                "page_size": 10,
                "results": [
                    {
                        "recipe_id": "b79327d05b8e5b838ad6cfd9576b30b6",
                        "label": "Chicken Vesuvio",
                        "calories": 4228.04,
                    }
                ],
                "window": [
                    {"kind": "page", "page": 1, "active": True, "enabled": True},
                    {"kind": "next", "page": None, "active": False, "enabled": True},
                ],
                "error": None,
            }
        }
    )


class CartItemInput(BaseModel):
    """
    Input model for adding a grocery item to the cart.

    Accepts the FoodItem dicts returned by the grocery search as-is.
    """
    fdc_id: int = Field(..., description="USDA FoodData Central id")
    description: str = Field(..., min_length=1, description="Food description")
    brand_owner: Optional[str] = Field(None, description="Brand owner (branded foods only)")
    data_type: Optional[str] = Field(None, description="FoodData Central data type")
    food_nutrients: List[FoodNutrient] = Field(default_factory=list)
    quantity: int = Field(1, ge=1, description="Quantity to add to cart (default: 1)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "fdc_id": 2346404,
                "description": "OAT MILK",
                "brand_owner": "Oatly Inc.",
                "food_nutrients": [{"nutrient_id": 1004, "name": "Total lipid (fat)", "amount": 2.92, "unit": "G"}],
                "quantity": 2,
            }
        }
    )


class CartView(BaseModel):
    """
    Response model for viewing the shopping cart.

    Items are grouped by fdc_id and sorted alphabetically by description.
    """
    items: List[CartItem] = Field(..., description="Grouped cart items with quantities")
    total_items: int = Field(..., ge=0, description="Sum of all quantities")
    unique_items: int = Field(..., ge=0, description="Number of distinct foods")


class DailyValuesInput(BaseModel):
    """Personal daily values from the questionnaire."""
    daily_values: List[DailyValue] = Field(..., description="Daily value per nutrient id (1..33)")


class NutrientRow(BaseModel):
    id: int
    label: str
    amount: float
    percentage: Optional[int] = Field(None, description="Percent of the daily (or weekly) value")


class NutrientChartResponse(BaseModel):
    """Data behind the nutrient chart; available is False until daily values exist."""
    available: bool
    weekly: bool = False
    reference: int = 100
    message: Optional[str] = None
    rows: List[NutrientRow] = Field(default_factory=list)


class OrderInput(BaseModel):
    """Input model for placing an order from the current cart."""
    store_to_visit: str = Field(..., min_length=1, description="Grocery store the order is for")


class OrderOut(BaseModel):
    """Placed order with its timestamp id."""
    order_id: int = Field(..., description="Millisecond timestamp of ordered_at")
    ordered_at: datetime
    store_to_visit: str
    cart: List[OrderItem] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    orders: List[OrderOut]


class ProfileOut(BaseModel):
    """Public view of a user profile."""
    user_id: str
    daily_values: List[DailyValue] = Field(default_factory=list)
    cart: List[CartItem] = Field(default_factory=list)
    order_count: int = 0

    @classmethod
    def from_profile(cls, profile: UserProfile, cart: List[CartItem]) -> "ProfileOut":
        return cls(
            user_id=profile.user_id,
            daily_values=profile.daily_values,
            cart=cart,
            order_count=len(profile.order_history),
        )


class StoreOut(BaseModel):
    """Grocery store directory entry."""
    id: int
    name: str
    url: str
    option: str = Field(..., description="Delivery/pickup option")
