"""
Backend API Client Module.

This module is the **single source of truth** for all backend API communication.
All HTTP calls to the FastAPI backend should go through functions in this module.

Key principles:
- Centralized error handling for network issues
- Consistent timeouts
- Graceful degradation when backend is unavailable
- Type hints for better IDE support and documentation

# NOTE: When adding new endpoints, follow this pattern:
    - Create a function that takes parameters needed for the endpoint
    - Use requests.get/post/put with proper error handling
    - Return parsed JSON (dict) or None on error
    - Log errors via st.error or st.warning for user visibility
    - Never let exceptions bubble up to crash the Streamlit app
"""

import os
from typing import Any, Dict, List, Optional

import requests
import streamlit as st


def get_backend_url() -> str:
    """
    Get the backend API base URL from environment variable or use default.

    Returns:
        Backend URL string with trailing slash removed. Defaults to http://localhost:8000
        for local development.
    """
    url = os.getenv("BACKEND_URL", "http://localhost:8000")
    return url.rstrip("/")


def _headers(session_id: Optional[str] = None, user_id: Optional[str] = None) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    if session_id:
        headers["X-Session-ID"] = session_id
    if user_id:
        headers["X-User-ID"] = user_id
    return headers


def _report_error(action: str, e: requests.exceptions.RequestException) -> None:
    if isinstance(e, requests.exceptions.Timeout):
        st.error("Request timed out. The backend may be slow or unreachable.")
    elif isinstance(e, requests.exceptions.ConnectionError):
        st.error("Could not connect to backend. Please check your connection and that the backend is running.")
    elif isinstance(e, requests.exceptions.HTTPError) and e.response is not None:
        try:
            detail = e.response.json().get("detail", e.response.text)
        except ValueError:
            detail = e.response.text
        st.error(f"{action} failed: {e.response.status_code} - {detail}")
    else:
        st.error(f"{action} failed: {str(e)}")


@st.cache_data(ttl=60)  # Cache for 60 seconds to avoid hitting backend too frequently
def get_health_status() -> Optional[Dict[str, Any]]:
    """
    Check backend health status by calling /health endpoint.

    Returns:
        The /health payload, or None if backend is unreachable or unhealthy.
    """
    try:
        response = requests.get(f"{get_backend_url()}/health", timeout=5)
        response.raise_for_status()
        data = response.json()
        return data if data.get("status") == "ok" else None
    except requests.exceptions.RequestException:
        return None


def submit_search(kind: str, session_id: str, query: str) -> Optional[Dict[str, Any]]:
    """
    Submit a new recipe ("recipes") or grocery ("foods") search.

    Returns:
        SearchPageView dict (status, query, active_page, total_pages, results,
        window, error), or None if the backend could not be reached.
    """
    try:
        response = requests.post(
            f"{get_backend_url()}/{kind}/search",
            json={"q": query},
            headers=_headers(session_id),
            timeout=30
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Search", e)
        return None


def navigate_search(
    kind: str,
    session_id: str,
    target: str,
    page: Optional[int] = None,
) -> Optional[Dict[str, Any]]:
    """
    Move the session's search to another page.

    Args:
        kind: "recipes" or "foods"
        session_id: Session identifier
        target: first, prev, page, next, or last
        page: Page number when target is "page"
    """
    payload: Dict[str, Any] = {"target": target}
    if page is not None:
        payload["page"] = page

    try:
        response = requests.post(
            f"{get_backend_url()}/{kind}/navigate",
            json=payload,
            headers=_headers(session_id),
            timeout=30
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Navigation", e)
        return None


def get_recipe(recipe_id: str, session_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Fetch the details of one recipe, or None on error."""
    try:
        response = requests.get(
            f"{get_backend_url()}/recipes/{recipe_id}",
            headers=_headers(session_id),
            timeout=30
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Loading recipe", e)
        return None


def add_to_cart_backend(
    session_id: str,
    food: Dict[str, Any],
    quantity: int = 1,
    user_id: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Add a grocery item (a FoodItem dict from the grocery search) to the cart.

    Returns:
        CartView dictionary, or None on error.
    """
    payload = {
        "fdc_id": food.get("fdc_id"),
        "description": food.get("description", ""),
        "brand_owner": food.get("brand_owner"),
        "data_type": food.get("data_type"),
        "food_nutrients": food.get("food_nutrients", []),
        "quantity": quantity,
    }

    try:
        response = requests.post(
            f"{get_backend_url()}/cart/add",
            json=payload,
            headers=_headers(session_id, user_id),
            timeout=10
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Adding item to cart", e)
        return None


def remove_from_cart_backend(
    session_id: str,
    fdc_id: int,
    qty: int = 1,
    user_id: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Remove qty of an item from the cart; returns the updated CartView or None."""
    try:
        response = requests.post(
            f"{get_backend_url()}/cart/remove",
            params={"fdc_id": fdc_id, "qty": qty},
            headers=_headers(session_id, user_id),
            timeout=10
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Removing item from cart", e)
        return None


def view_cart_backend(session_id: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    View the current shopping cart via backend API.

    Returns:
        CartView dictionary with items, total_items and unique_items, or None on error.
    """
    try:
        response = requests.get(
            f"{get_backend_url()}/cart/view",
            headers=_headers(session_id, user_id),
            timeout=10
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.warning(f"Could not fetch cart: {str(e)}")
        return None


def get_nutrient_reference() -> List[Dict[str, Any]]:
    """Nutrient labels with standard daily values ([] on error)."""
    try:
        response = requests.get(f"{get_backend_url()}/nutrients/reference", timeout=10)
        response.raise_for_status()
        return response.json().get("nutrients", [])
    except requests.exceptions.RequestException as e:
        _report_error("Loading nutrient reference", e)
        return []


def get_profile(user_id: str) -> Optional[Dict[str, Any]]:
    """Fetch a user's profile; None when it does not exist yet or on error."""
    try:
        response = requests.get(f"{get_backend_url()}/users/{user_id}/profile", timeout=10)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Loading profile", e)
        return None


def save_daily_values(user_id: str, daily_values: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Store the user's daily values (list of {id, value})."""
    try:
        response = requests.put(
            f"{get_backend_url()}/users/{user_id}/daily-values",
            json={"daily_values": daily_values},
            timeout=10
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Saving daily values", e)
        return None


def get_nutrient_chart(user_id: str, weekly: bool = False) -> Optional[Dict[str, Any]]:
    """Fetch the nutrient chart data of the user's cart."""
    try:
        response = requests.get(
            f"{get_backend_url()}/users/{user_id}/nutrients/chart",
            params={"weekly": str(weekly).lower()},
            timeout=10
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Loading nutrient chart", e)
        return None


def place_order(user_id: str, store_to_visit: str, session_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Place an order from the user's cart; returns the order or None."""
    try:
        response = requests.post(
            f"{get_backend_url()}/users/{user_id}/orders",
            json={"store_to_visit": store_to_visit},
            headers=_headers(session_id),
            timeout=10
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Placing order", e)
        return None


def list_orders(user_id: str, order: str = "desc") -> List[Dict[str, Any]]:
    """Order history of the user, newest first by default ([] on error)."""
    try:
        response = requests.get(
            f"{get_backend_url()}/users/{user_id}/orders",
            params={"order": order},
            timeout=10
        )
        response.raise_for_status()
        return response.json().get("orders", [])
    except requests.exceptions.RequestException as e:
        _report_error("Loading order history", e)
        return []


def get_order(user_id: str, order_id: int) -> Optional[Dict[str, Any]]:
    try:
        response = requests.get(f"{get_backend_url()}/users/{user_id}/orders/{order_id}", timeout=10)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("Loading order", e)
        return None


@st.cache_data(ttl=3600)
def get_stores() -> List[Dict[str, Any]]:
    """Grocery store directory ([] on error)."""
    try:
        response = requests.get(f"{get_backend_url()}/stores", timeout=10)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException:
        return []
