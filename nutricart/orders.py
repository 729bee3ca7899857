"""
Order placement and order history.

Placing an order snapshots the user's grouped cart into an Order, appends it
to the profile's order history, and empties the cart. Orders are identified
in URLs by the millisecond timestamp of ordered_at.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from .cart import group_cart_items
from .models import Order, OrderItem, UserProfile
from .profiles import ProfileStore

logger = logging.getLogger(__name__)


class EmptyCartError(ValueError):
    """Raised when an order is placed with an empty cart."""
    pass


def place_order(
    store: ProfileStore,
    user_id: str,
    store_to_visit: str,
    ordered_at: Optional[datetime] = None,
) -> Order:
    """
    Turn the user's cart into an order.

    Args:
        store: Profile store holding the user's cart and history
        user_id: Signed-in user placing the order
        store_to_visit: Grocery store the order is for
        ordered_at: Order timestamp (defaults to now, UTC)

    Raises:
        EmptyCartError: If the user's cart is empty
    """
    placed: List[Order] = []
    timestamp = ordered_at or datetime.now(timezone.utc)

    # The cart is read and emptied within one profile update
    def apply(p: UserProfile) -> None:
        items = group_cart_items(p.cart)
        if not items:
            raise EmptyCartError("Cannot place an order with an empty cart")
        order = Order(
            ordered_at=timestamp,
            store_to_visit=store_to_visit,
            cart=[
                OrderItem(
                    fdc_id=item.fdc_id,
                    description=item.description,
                    brand_owner=item.brand_owner,
                    quantity=item.quantity,
                )
                for item in items
            ],
        )
        p.order_history.append(order)
        p.cart = []
        placed.append(order)

    store.update(user_id, apply)
    order = placed[0]
    logger.info("Order %d placed by %s for %s (%d items)", order.order_id, user_id, store_to_visit, len(order.cart))
    return order


def sort_orders(orders: List[Order], descending: bool = True) -> List[Order]:
    """Sort orders by ordered_at, newest first unless descending is False."""
    return sorted(orders, key=lambda order: order.ordered_at, reverse=descending)


def find_order(orders: List[Order], order_id: int) -> Optional[Order]:
    """Find an order by its millisecond timestamp id."""
    for order in orders:
        if order.order_id == order_id:
            return order
    return None
