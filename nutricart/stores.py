"""
Directory of grocery stores and their delivery options.
"""

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class GroceryStore:
    id: int
    name: str
    url: str
    option: str  # delivery/pickup option shown next to the store

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


GROCERY_STORES: List[GroceryStore] = [
    GroceryStore(1, "Costco", "https://www.costco.ca/grocery-household.html", "7-10 day delivery"),
    GroceryStore(2, "Save-On-Foods", "https://shop.saveonfoods.com/", "pickup/delivery"),
    GroceryStore(3, "Walmart", "https://www.walmart.ca/en/grocery/N-117", "time-slotted delivery"),
    GroceryStore(4, "IGA", "https://shop.igabc.com/", "pickup only"),
    GroceryStore(5, "H-Mart", "https://hmartpickup.ca/", "pickup only"),
    GroceryStore(6, "T&T Supermarket", "https://www.tntsupermarket.com/", "pickup only"),
    GroceryStore(7, "No Frills", "https://www.nofrills.ca/", "pickup only"),
    GroceryStore(8, "Real Canadian Superstore", "https://www.realcanadiansuperstore.ca/", "pickup/delivery"),
]


def list_stores() -> List[GroceryStore]:
    return list(GROCERY_STORES)


def get_store_by_name(name: str) -> Optional[GroceryStore]:
    """Case-insensitive lookup by store name."""
    wanted = name.strip().lower()
    for store in GROCERY_STORES:
        if store.name.lower() == wanted:
            return store
    return None
