"""
Cart store for grocery items.

A cart is kept as a list of raw entries, one per item added, exactly as the
profile document stores it. The cart view collapses repeated entries of the
same food (same fdc_id) into one CartItem with a quantity, and sorts the
result alphabetically by description.

Carts are stored:
- in the user's profile when a user id is given (signed-in users)
- in an in-memory store keyed by session_id otherwise
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from .models import CartItem, FoodItem
from .profiles import ProfileStore, get_profile_store

logger = logging.getLogger(__name__)

# In-memory store: session_id -> raw cart entries
CART_STORE: Dict[str, List[Dict[str, Any]]] = {}
_cart_lock = threading.Lock()


def group_cart_items(entries: Iterable[Dict[str, Any]]) -> List[CartItem]:
    """
    Collapse repeated entries into CartItems with quantities.

    The first entry seen for an fdc_id provides the item's fields; its
    quantity is the number of entries with that fdc_id.

    Returns:
        CartItems sorted alphabetically by description
    """
    grouped: Dict[int, Dict[str, Any]] = {}
    counts: Dict[int, int] = {}
    for entry in entries:
        food = FoodItem.model_validate(entry)
        if food.fdc_id not in grouped:
            grouped[food.fdc_id] = food.model_dump()
            counts[food.fdc_id] = 0
        counts[food.fdc_id] += 1

    items = [CartItem(**data, quantity=counts[fdc_id]) for fdc_id, data in grouped.items()]
    return sort_alphabetically(items)


def sort_alphabetically(items: List[CartItem]) -> List[CartItem]:
    """Sort cart items by description (case-insensitive)."""
    return sorted(items, key=lambda item: item.description.lower())


def cart_summary(items: List[CartItem]) -> Dict[str, int]:
    """
    Summarize a grouped cart.

    Returns:
        Dictionary with total_items (sum of quantities) and unique_items
    """
    return {
        "total_items": sum(item.quantity for item in items),
        "unique_items": len(items),
    }


def _load_entries(session_id: str, user_id: Optional[str], store: ProfileStore) -> List[Dict[str, Any]]:
    if user_id:
        profile = store.get(user_id)
        return list(profile.cart) if profile else []
    with _cart_lock:
        return list(CART_STORE.get(session_id, []))


def _update_entries(
    session_id: str,
    user_id: Optional[str],
    fn: Callable[[List[Dict[str, Any]]], List[Dict[str, Any]]],
    store: ProfileStore,
) -> List[Dict[str, Any]]:
    """
    Replace the cart entries with fn(entries) as one atomic step.

    Profile carts go through ProfileStore.update; session carts hold
    _cart_lock from load to save.
    """
    if user_id:
        updated: List[Dict[str, Any]] = []

        def apply(profile):
            updated[:] = fn(list(profile.cart))
            profile.cart = list(updated)

        store.update(user_id, apply)
        return updated

    with _cart_lock:
        entries = fn(list(CART_STORE.get(session_id, [])))
        CART_STORE[session_id] = entries
        return list(entries)


def get_cart(session_id: str, user_id: Optional[str] = None, store: Optional[ProfileStore] = None) -> List[CartItem]:
    """
    Retrieve the grouped cart for a session or a signed-in user.

    Args:
        session_id: Unique identifier for the browser session
        user_id: Signed-in user; when set the cart lives in the user's profile
        store: Profile store (defaults to the process-wide store)
    """
    store = store or get_profile_store()
    return group_cart_items(_load_entries(session_id, user_id, store))


def add_to_cart(
    session_id: str,
    item_data: Dict[str, Any],
    quantity: int = 1,
    user_id: Optional[str] = None,
    store: Optional[ProfileStore] = None,
) -> List[CartItem]:
    """
    Add quantity entries of a food item to the cart.

    Raises:
        ValidationError: If item_data doesn't match FoodItem
        ValueError: If quantity is less than 1
    """
    if quantity < 1:
        raise ValueError("quantity must be at least 1")
    store = store or get_profile_store()
    entry = FoodItem.model_validate(item_data).model_dump()

    def append(entries):
        entries.extend(dict(entry) for _ in range(quantity))
        return entries

    entries = _update_entries(session_id, user_id, append, store)

    logger.debug("Added %d x %s to cart (session=%s user=%s)", quantity, entry["fdc_id"], session_id, user_id)
    return group_cart_items(entries)


def remove_from_cart(
    session_id: str,
    fdc_id: int,
    qty: int = 1,
    user_id: Optional[str] = None,
    store: Optional[ProfileStore] = None,
) -> List[CartItem]:
    """
    Remove up to qty entries of a food from the cart.

    If the item doesn't exist in the cart, the operation is a no-op.
    """
    store = store or get_profile_store()

    def drop(entries):
        remaining: List[Dict[str, Any]] = []
        to_remove = qty
        # Drop the most recently added entries first
        for entry in reversed(entries):
            if to_remove > 0 and int(entry.get("fdc_id", entry.get("fdcId", -1))) == fdc_id:
                to_remove -= 1
                continue
            remaining.append(entry)
        remaining.reverse()
        return remaining

    return group_cart_items(_update_entries(session_id, user_id, drop, store))


def clear_cart(session_id: str, user_id: Optional[str] = None, store: Optional[ProfileStore] = None) -> None:
    """Remove all entries from the cart."""
    store = store or get_profile_store()
    _update_entries(session_id, user_id, lambda entries: [], store)
