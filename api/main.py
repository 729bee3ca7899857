"""
FastAPI application for the NutriCart API.

This module defines the REST API endpoints for the NutriCart backend:
- POST /recipes/search, POST /recipes/navigate: Paged Edamam recipe search
- GET /recipes/{recipe_id}: Recipe details
- POST /foods/search, POST /foods/navigate: Paged USDA grocery search
- GET /foods/{fdc_id}: Grocery item details
- POST /cart/add, POST /cart/remove, GET /cart/view: Shopping cart
- PUT /users/{user_id}/daily-values, GET /users/{user_id}/profile: Daily values
- GET /users/{user_id}/nutrients/chart: Nutrient intake chart of the user's cart
- POST /users/{user_id}/orders, GET /users/{user_id}/orders[/{order_id}]: Orders
- GET /stores: Grocery store directory

Searches are session-based via the X-Session-ID header: every session gets
its own pagination controller per search kind, so navigation targets
(first, prev, page, next, last) always apply to that session's last query.
Carts use the same header; when X-User-ID is also sent, the cart is kept in
the user's profile instead.

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import logging
import time
from typing import List, Optional

from fastapi import FastAPI, Header, HTTPException, Query, status

from api.config import SearchConfig
from api.schemas import (
    CartItemInput,
    CartView,
    DailyValuesInput,
    NavigateRequest,
    NutrientChartResponse,
    OrderInput,
    OrderListResponse,
    OrderOut,
    ProfileOut,
    SearchPageView,
    SearchRequest,
    StoreOut,
)
from nutricart import search as search_sessions
from nutricart.cart import add_to_cart, cart_summary, get_cart, remove_from_cart
from nutricart.db import db_is_enabled
from nutricart.errors import ConfigError, FetchError, ProfileNotFound, UpstreamError
from nutricart.events import (
    log_cart_items_added,
    log_cart_items_removed,
    log_order_placed,
    log_page_navigated,
    log_recipe_viewed,
    log_search_submitted,
)
from nutricart.models import CartItem, Order
from nutricart.nutrients import NUTRIENT_LABELS, STANDARD_DAILY_VALUES, build_nutrient_chart, cart_nutrients
from nutricart.orders import EmptyCartError, find_order, place_order, sort_orders
from nutricart.profiles import get_profile_store, set_daily_values
from nutricart.stores import list_stores

logger = logging.getLogger(__name__)

# Track app start time for uptime calculation
_APP_START_TIME = time.time()

app = FastAPI(
    title="NutriCart API",
    description="Backend API for recipe and grocery search, carts, nutrient charts, and orders",
    version="1.0.0",
    tags_metadata=[
        {
            "name": "search",
            "description": "Paged recipe (Edamam) and grocery (USDA) search. Use X-Session-ID header.",
        },
        {
            "name": "cart",
            "description": "Manage shopping cart items. Use X-Session-ID header, and X-User-ID to persist.",
        },
        {
            "name": "users",
            "description": "Daily values, nutrient chart, and order history of a user.",
        },
        {
            "name": "stores",
            "description": "Grocery store directory.",
        },
        {
            "name": "health",
            "description": "Health check and monitoring endpoints.",
        },
    ],
)

# One pagination controller per (session, search kind)
SEARCH_SESSIONS = search_sessions.SearchSessionStore(
    page_size=SearchConfig.get_page_size(),
    search_limit=SearchConfig.get_search_limit(),
    timeout=SearchConfig.get_timeout_seconds(),
)


def get_session(x_session_id: Optional[str] = Header(None, alias="X-Session-ID")) -> str:
    """
    Get session ID from the X-Session-ID header.

    Args:
        x_session_id: Session ID from X-Session-ID header

    Returns:
        Session ID string

    Raises:
        HTTPException 400: If session ID is not provided
    """
    if not x_session_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Session-ID header is required. Please provide a session identifier.",
            headers={"X-Session-ID": "required"}
        )
    return x_session_id


def _connector(kind: str):
    """Instantiate the connector for a search kind, mapping config errors to 503."""
    try:
        return search_sessions._get_connector_map()[kind](timeout=SearchConfig.get_timeout_seconds())
    except ConfigError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        ) from e


def _submit(kind: str, body: SearchRequest, x_session_id: Optional[str]) -> SearchPageView:
    session = get_session(x_session_id)
    try:
        result = search_sessions.submit_search(SEARCH_SESSIONS, session, kind, body.q)
    except ConfigError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        ) from e

    log_search_submitted(session, kind, body.q, result.status, len(result.results))
    return SearchPageView(**result.to_dict())


def _navigate(kind: str, body: NavigateRequest, x_session_id: Optional[str]) -> SearchPageView:
    session = get_session(x_session_id)
    try:
        result = search_sessions.navigate_search(SEARCH_SESSIONS, session, kind, body.target, page=body.page)
    except ConfigError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        ) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        ) from e

    active_page = result.state.active_page if result.state else None
    log_page_navigated(session, kind, body.target, result.status, active_page)
    return SearchPageView(**result.to_dict())


@app.post(
    "/recipes/search",
    response_model=SearchPageView,
    tags=["search"],
    summary="Submit a new recipe search",
    description="Start a new Edamam recipe search for the session and return page 1 with its "
                "pagination window. Upstream failures are reported in the body with status 'error'.",
)
def search_recipes(
    body: SearchRequest,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID", description="Session identifier (required)"),
) -> SearchPageView:
    """
    Submit a new recipe search.

    The session's previous query is replaced only if page 1 of the new query
    is fetched successfully; otherwise the previous page stays in place and
    status is "error".

    Args:
        body: SearchRequest with the query string
        x_session_id: Session ID from X-Session-ID header

    Returns:
        SearchPageView with status, query, active_page, total_pages, results, and window

    Raises:
        HTTPException 400: If X-Session-ID is missing
        HTTPException 503: If Edamam credentials are not configured

    Example:
        ```bash
        POST /recipes/search
        Header: X-Session-ID: user123
        Body: {"q": "chicken"}
        ```
    """
    return _submit("recipes", body, x_session_id)


@app.post(
    "/recipes/navigate",
    response_model=SearchPageView,
    tags=["search"],
    summary="Move through the pages of the current recipe search",
)
def navigate_recipes(
    body: NavigateRequest,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID", description="Session identifier (required)"),
) -> SearchPageView:
    """
    Navigate the session's recipe search.

    Targets that lead outside [1, total_pages] (and any navigation before a
    query was submitted) return status "noop" with the current page unchanged.

    Raises:
        HTTPException 400: If X-Session-ID is missing or target is not a valid target
    """
    return _navigate("recipes", body, x_session_id)


@app.get(
    "/recipes/{recipe_id}",
    tags=["search"],
    summary="Get the details of a recipe",
)
def get_recipe(
    recipe_id: str,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
):
    """
    Look up one recipe by the id extracted from its Edamam URI.

    Raises:
        HTTPException 404: If Edamam does not know the recipe
        HTTPException 502: If Edamam could not be reached or answered with an error
    """
    connector = _connector("recipes")
    try:
        recipe = connector.get_recipe(recipe_id)
    except FetchError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Error fetching recipe from Edamam: {e}"
        ) from e

    if recipe is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recipe '{recipe_id}' not found"
        )

    log_recipe_viewed(x_session_id, recipe_id, recipe.get("label", ""))
    return recipe


@app.post(
    "/foods/search",
    response_model=SearchPageView,
    tags=["search"],
    summary="Submit a new grocery search",
    description="Start a new USDA FoodData Central search for the session and return page 1.",
)
def search_foods(
    body: SearchRequest,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID", description="Session identifier (required)"),
) -> SearchPageView:
    """Submit a new grocery search (same contract as POST /recipes/search)."""
    return _submit("foods", body, x_session_id)


@app.post(
    "/foods/navigate",
    response_model=SearchPageView,
    tags=["search"],
    summary="Move through the pages of the current grocery search",
)
def navigate_foods(
    body: NavigateRequest,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID", description="Session identifier (required)"),
) -> SearchPageView:
    return _navigate("foods", body, x_session_id)


@app.get(
    "/foods/{fdc_id}",
    tags=["search"],
    summary="Get the details of a grocery item",
)
def get_food(fdc_id: int):
    """
    Fetch one grocery item with its full nutrient list.

    Raises:
        HTTPException 404: If USDA does not know the fdc_id
        HTTPException 502: If USDA could not be reached or answered with an error
    """
    connector = _connector("foods")
    try:
        food = connector.get_food(fdc_id)
    except UpstreamError as e:
        if e.status == status.HTTP_404_NOT_FOUND:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Food {fdc_id} not found"
            ) from e
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Error fetching food from USDA: {e}"
        ) from e
    except FetchError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Error fetching food from USDA: {e}"
        ) from e

    if food is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Food {fdc_id} not found"
        )
    return food


def _cart_view(items: List[CartItem]) -> CartView:
    return CartView(items=items, **cart_summary(items))


@app.post(
    "/cart/add",
    response_model=CartView,
    tags=["cart"],
    summary="Add an item to the shopping cart",
    description="Add a grocery item to the cart. Adding an item that is already in the cart "
                "increases its quantity. Use X-Session-ID header for session management.",
)
def add_item(
    item: CartItemInput,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID", description="Session identifier (required)"),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID", description="Signed-in user (optional)"),
) -> CartView:
    """
    Add an item to the shopping cart.

    Args:
        item: CartItemInput model with the grocery item and the quantity to add
        x_session_id: Session ID from X-Session-ID header
        x_user_id: When set, the cart is stored in this user's profile

    Returns:
        CartView containing:
        - items: Grouped cart items sorted by description
        - total_items / unique_items: Cart counts

    Raises:
        HTTPException 400: If X-Session-ID is missing or the item data is invalid
        HTTPException 500: If there's an error adding the item to cart

    Example:
        ```bash
        POST /cart/add
        Header: X-Session-ID: user123
        Body: {"fdc_id": 2346404, "description": "OAT MILK", "quantity": 2}
        ```
    """
    session = get_session(x_session_id)

    try:
        items = add_to_cart(
            session,
            item.model_dump(exclude={"quantity"}),
            quantity=item.quantity,
            user_id=x_user_id,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid cart item data: {str(e)}"
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error adding item to cart: {str(e)}"
        ) from e

    log_cart_items_added(session, item.fdc_id, item.quantity)
    return _cart_view(items)


@app.post(
    "/cart/remove",
    response_model=CartView,
    tags=["cart"],
    summary="Remove an item from the shopping cart",
    description="Reduce the quantity of an item. If qty reaches the item's quantity, the item is removed.",
)
def remove_item(
    fdc_id: int = Query(..., description="USDA FoodData Central id"),
    qty: int = Query(1, ge=1, description="Quantity to remove (default: 1)"),
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID", description="Session identifier (required)"),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID", description="Signed-in user (optional)"),
) -> CartView:
    """
    Remove an item from the shopping cart or reduce its quantity.

    Removing an item that is not in the cart is a no-op.

    Example:
        ```bash
        POST /cart/remove?fdc_id=2346404&qty=1
        Header: X-Session-ID: user123
        ```
    """
    session = get_session(x_session_id)

    try:
        items = remove_from_cart(session, fdc_id, qty, user_id=x_user_id)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error removing item from cart: {str(e)}"
        ) from e

    log_cart_items_removed(session, fdc_id, qty)
    return _cart_view(items)


@app.get(
    "/cart/view",
    response_model=CartView,
    tags=["cart"],
    summary="View the shopping cart",
)
def view_cart(
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID", description="Session identifier (required)"),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID", description="Signed-in user (optional)"),
) -> CartView:
    """Get the grouped cart of the session (or of the signed-in user)."""
    session = get_session(x_session_id)
    return _cart_view(get_cart(session, user_id=x_user_id))


@app.get("/nutrients/reference", tags=["users"])
def nutrient_reference():
    """
    Nutrient labels and standard daily values.

    Used by the daily value questionnaire to prefill its 33 inputs.
    """
    return {
        "nutrients": [
            {"id": i, "label": label, "standard_value": value}
            for i, (label, value) in enumerate(zip(NUTRIENT_LABELS, STANDARD_DAILY_VALUES), start=1)
        ]
    }


@app.put(
    "/users/{user_id}/daily-values",
    response_model=ProfileOut,
    tags=["users"],
    summary="Set a user's daily values",
)
def put_daily_values(user_id: str, body: DailyValuesInput) -> ProfileOut:
    """
    Replace the user's daily values (creating the profile on first use).

    Entries with a repeated id keep the last value; entries are stored sorted by id.
    """
    store = get_profile_store()
    profile = set_daily_values(store, user_id, body.daily_values)
    return ProfileOut.from_profile(profile, get_cart(user_id, user_id=user_id, store=store))


@app.get(
    "/users/{user_id}/profile",
    response_model=ProfileOut,
    tags=["users"],
    summary="Get a user's profile",
)
def get_user_profile(user_id: str) -> ProfileOut:
    """
    Raises:
        HTTPException 404: If the user has no profile yet
    """
    store = get_profile_store()
    try:
        profile = store.require(user_id)
    except ProfileNotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        ) from e
    return ProfileOut.from_profile(profile, get_cart(user_id, user_id=user_id, store=store))


@app.get(
    "/users/{user_id}/nutrients/chart",
    response_model=NutrientChartResponse,
    tags=["users"],
    summary="Nutrient intake chart of the user's cart",
    description="Percent of the user's daily (or weekly) value reached by the cart, per nutrient. "
                "available is False until the user has set daily values.",
)
def nutrient_chart(
    user_id: str,
    weekly: bool = Query(False, description="Compare against 7 x the daily values"),
) -> NutrientChartResponse:
    store = get_profile_store()
    profile = store.get(user_id)
    daily_values = profile.daily_values if profile else []
    items = get_cart(user_id, user_id=user_id, store=store)

    chart = build_nutrient_chart(cart_nutrients(items), daily_values, weekly=weekly)
    return NutrientChartResponse(**chart.to_dict())


def _order_out(order: Order) -> OrderOut:
    return OrderOut(
        order_id=order.order_id,
        ordered_at=order.ordered_at,
        store_to_visit=order.store_to_visit,
        cart=order.cart,
    )


@app.post(
    "/users/{user_id}/orders",
    response_model=OrderOut,
    status_code=status.HTTP_201_CREATED,
    tags=["users"],
    summary="Place an order from the user's cart",
)
def create_order(
    user_id: str,
    body: OrderInput,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
) -> OrderOut:
    """
    Turn the user's cart into an order and empty the cart.

    Raises:
        HTTPException 400: If the user's cart is empty
    """
    store = get_profile_store()
    try:
        order = place_order(store, user_id, body.store_to_visit)
    except EmptyCartError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        ) from e

    log_order_placed(x_session_id, order.order_id, order.store_to_visit, sum(i.quantity for i in order.cart))
    return _order_out(order)


@app.get(
    "/users/{user_id}/orders",
    response_model=OrderListResponse,
    tags=["users"],
    summary="List a user's orders",
)
def list_orders(
    user_id: str,
    order: str = Query("desc", description="Sort by order time: 'desc' (newest first) or 'asc'"),
) -> OrderListResponse:
    """
    List the user's order history, newest first by default.

    Raises:
        HTTPException 400: If order is not 'asc' or 'desc'
    """
    if order.lower() not in ("asc", "desc"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid order: '{order}'. Valid options: 'asc', 'desc'"
        )

    profile = get_profile_store().get(user_id)
    history = profile.order_history if profile else []
    orders = sort_orders(history, descending=order.lower() == "desc")
    return OrderListResponse(orders=[_order_out(o) for o in orders])


@app.get(
    "/users/{user_id}/orders/{order_id}",
    response_model=OrderOut,
    tags=["users"],
    summary="Get one order by its timestamp id",
)
def get_order(user_id: str, order_id: int) -> OrderOut:
    profile = get_profile_store().get(user_id)
    found = find_order(profile.order_history, order_id) if profile else None
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order {order_id} not found for user '{user_id}'"
        )
    return _order_out(found)


@app.get("/stores", response_model=List[StoreOut], tags=["stores"])
def get_stores() -> List[StoreOut]:
    """Grocery stores with their delivery/pickup options."""
    return [StoreOut(**s.to_dict()) for s in list_stores()]


@app.get("/health", tags=["health"])
def health():
    """
    Health check endpoint for monitoring and status checks.

    Returns:
        Dictionary with status, API metadata, uptime information, and database status.
        Always returns 200 OK if the endpoint is reachable.
    """
    uptime_seconds = int(time.time() - _APP_START_TIME)

    return {
        "status": "ok",
        "name": "NutriCart API",
        "version": "1.0.0",
        "uptime_seconds": uptime_seconds,
        "db_enabled": db_is_enabled(),
        "config": api.config.get_required_env_vars(),
    }


@app.get("/")
def root():
    """
    Root endpoint providing API information.

    Returns:
        Dictionary with API name and version
    """
    return {
        "name": "NutriCart API",
        "version": "1.0.0",
        "description": "Backend API for recipe and grocery search, carts, nutrient charts, and orders",
        "docs": "/docs",
    }
