"""
Nutrient intake calculations for the cart chart.

The chart compares the nutrients contained in the cart against the user's
personal daily values. 33 nutrients are tracked, identified by ids 1..33 in
the order of NUTRIENT_LABELS. Food items from USDA report nutrients by their
FoodData Central nutrient id, which USDA_NUTRIENT_IDS maps onto chart ids.

Percentages are ceil(100 * amount / daily_value), with the daily value
multiplied by 7 in the weekly view. 100 % is the reference line.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .models import NUTRIENT_COUNT, CartItem, DailyValue

logger = logging.getLogger(__name__)

NUTRIENT_LABELS = [
    "Fat", "Fatty acids", "Fibre", "Sugars", "Cholesterol", "Sodium", "Potassium",
    "Calcium", "Iron", "Vitamin A", "Vitamin C", "Vitamin D", "Vitamin E", "Vitamin K",
    "Thiamin", "Riboflavin", "Niacin", "Vitamin B6", "Folate", "Vitamin B12", "Choline",
    "Biotin", "Pantothenate", "Phosphorous", "Iodide", "Magnesium", "Zinc", "Selenium",
    "Copper", "Manganese", "Chromium", "Molybdenum", "Chloride",
]

# FoodData Central nutrient id -> chart id (1-based index into NUTRIENT_LABELS)
USDA_NUTRIENT_IDS: Dict[int, int] = {
    1004: 1,   # Total lipid (fat)
    1258: 2,   # Fatty acids, total saturated
    1079: 3,   # Fiber, total dietary
    2000: 4,   # Sugars, total
    1253: 5,   # Cholesterol
    1093: 6,   # Sodium, Na
    1092: 7,   # Potassium, K
    1087: 8,   # Calcium, Ca
    1089: 9,   # Iron, Fe
    1106: 10,  # Vitamin A, RAE
    1162: 11,  # Vitamin C
    1114: 12,  # Vitamin D (D2 + D3)
    1109: 13,  # Vitamin E (alpha-tocopherol)
    1185: 14,  # Vitamin K (phylloquinone)
    1165: 15,  # Thiamin
    1166: 16,  # Riboflavin
    1167: 17,  # Niacin
    1175: 18,  # Vitamin B-6
    1177: 19,  # Folate, total
    1178: 20,  # Vitamin B-12
    1180: 21,  # Choline, total
    1176: 22,  # Biotin
    1170: 23,  # Pantothenic acid
    1091: 24,  # Phosphorus, P
    1100: 25,  # Iodine, I
    1090: 26,  # Magnesium, Mg
    1095: 27,  # Zinc, Zn
    1103: 28,  # Selenium, Se
    1098: 29,  # Copper, Cu
    1101: 30,  # Manganese, Mn
    1096: 31,  # Chromium, Cr
    1102: 32,  # Molybdenum, Mo
    1088: 33,  # Chlorine, Cl
}

# Adult reference daily values (FDA label values), same order as NUTRIENT_LABELS
STANDARD_DAILY_VALUES = [
    78, 20, 28, 50, 300, 2300, 4700, 1300, 18, 900, 90, 20, 15, 120, 1.2, 1.3, 16,
    1.7, 400, 2.4, 550, 30, 5, 1250, 150, 420, 11, 55, 0.9, 2.3, 35, 45, 2300,
]

UNAVAILABLE_MESSAGE = (
    "You need to evaluate your daily value first to make the chart visible."
)


def standard_daily_values() -> List[DailyValue]:
    """Reference daily values for all 33 nutrients."""
    return [DailyValue(id=i, value=v) for i, v in enumerate(STANDARD_DAILY_VALUES, start=1)]


def cart_nutrients(items: Iterable[CartItem]) -> List[Dict[str, Any]]:
    """
    Flatten cart items into chart-id nutrient entries.

    Each item's nutrient amounts are multiplied by its quantity. Nutrients
    that are not tracked by the chart are dropped.

    Returns:
        List of {"id": chart_id, "amount": float}
    """
    entries: List[Dict[str, Any]] = []
    for item in items:
        for nutrient in item.food_nutrients:
            chart_id = USDA_NUTRIENT_IDS.get(nutrient.nutrient_id)
            if chart_id is None:
                continue
            entries.append({"id": chart_id, "amount": nutrient.amount * item.quantity})
    return entries


def sum_nutrient_amounts(nutrients: Iterable[Mapping[str, Any]]) -> List[float]:
    """
    Total the amount of each of the 33 nutrients.

    Args:
        nutrients: Entries with "id" (1..33, int or numeric string) and "amount"

    Returns:
        List of 33 totals, index i holding nutrient id i + 1
    """
    totals = [0.0] * NUTRIENT_COUNT
    for entry in nutrients:
        try:
            nutrient_id = int(entry.get("id"))
        except (TypeError, ValueError):
            logger.debug("Ignoring nutrient entry without a numeric id: %r", entry)
            continue
        if 1 <= nutrient_id <= NUTRIENT_COUNT:
            totals[nutrient_id - 1] += float(entry.get("amount") or 0.0)
    return totals


def intake_percentages(
    amounts: Sequence[float],
    daily_values: Iterable[DailyValue],
    weekly: bool = False,
) -> List[Optional[int]]:
    """
    Percentage of the daily (or weekly) value reached for each nutrient.

    Returns:
        List of 33 entries; None where the user has no daily value for that nutrient
    """
    percentages: List[Optional[int]] = [None] * NUTRIENT_COUNT
    days = 7 if weekly else 1
    for dv in daily_values:
        index = dv.id - 1
        percentages[index] = math.ceil(100 * amounts[index] / (dv.value * days))
    return percentages


@dataclass
class NutrientChart:
    """Data behind the horizontal nutrient bar chart."""
    available: bool
    weekly: bool = False
    labels: List[str] = field(default_factory=lambda: list(NUTRIENT_LABELS))
    amounts: List[float] = field(default_factory=list)
    percentages: List[Optional[int]] = field(default_factory=list)
    reference: int = 100
    message: Optional[str] = None

    def rows(self) -> List[Dict[str, Any]]:
        """One row per nutrient, for tabular/chart rendering."""
        return [
            {"id": i + 1, "label": label, "amount": amount, "percentage": pct}
            for i, (label, amount, pct) in enumerate(zip(self.labels, self.amounts, self.percentages))
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "available": self.available,
            "weekly": self.weekly,
            "reference": self.reference,
            "message": self.message,
            "rows": self.rows(),
        }


def build_nutrient_chart(
    nutrients: Iterable[Mapping[str, Any]],
    daily_values: Sequence[DailyValue],
    weekly: bool = False,
) -> NutrientChart:
    """
    Build the chart data for a set of nutrient entries.

    Without daily values the chart is unavailable and carries a message
    asking the user to fill in the questionnaire.
    """
    if not daily_values:
        return NutrientChart(available=False, weekly=weekly, message=UNAVAILABLE_MESSAGE)

    amounts = sum_nutrient_amounts(nutrients)
    return NutrientChart(
        available=True,
        weekly=weekly,
        amounts=amounts,
        percentages=intake_percentages(amounts, daily_values, weekly=weekly),
    )
