"""
Tests for the nutrient intake calculations.
"""

import pytest

from nutricart.cart import group_cart_items
from nutricart.models import DailyValue
from nutricart.nutrients import (
    NUTRIENT_LABELS,
    STANDARD_DAILY_VALUES,
    UNAVAILABLE_MESSAGE,
    USDA_NUTRIENT_IDS,
    build_nutrient_chart,
    cart_nutrients,
    intake_percentages,
    standard_daily_values,
    sum_nutrient_amounts,
)


class TestReferenceData:
    def test_33_nutrients(self):
        assert len(NUTRIENT_LABELS) == 33
        assert len(STANDARD_DAILY_VALUES) == 33
        assert NUTRIENT_LABELS[0] == "Fat"
        assert NUTRIENT_LABELS[-1] == "Chloride"

    def test_usda_mapping_covers_every_chart_id(self):
        assert sorted(USDA_NUTRIENT_IDS.values()) == list(range(1, 34))

    def test_standard_daily_values(self):
        values = standard_daily_values()
        assert [v.id for v in values] == list(range(1, 34))
        assert values[5].value == 2300  # Sodium


class TestSumNutrientAmounts:
    def test_totals_by_id(self):
        totals = sum_nutrient_amounts([
            {"id": 1, "amount": 2.5},
            {"id": "1", "amount": 1.5},
            {"id": 33, "amount": 10},
        ])
        assert totals[0] == 4.0
        assert totals[32] == 10.0
        assert sum(totals) == 14.0

    def test_ignores_unknown_ids(self):
        totals = sum_nutrient_amounts([{"id": 0, "amount": 5}, {"id": 34, "amount": 5}, {"id": None, "amount": 5}])
        assert totals == [0.0] * 33


class TestIntakePercentages:
    def test_daily(self):
        amounts = [0.0] * 33
        amounts[0] = 39.0
        percentages = intake_percentages(amounts, [DailyValue(id=1, value=78)])
        assert percentages[0] == 50
        assert percentages[1] is None

    def test_rounds_up(self):
        amounts = [0.0] * 33
        amounts[2] = 1.0
        assert intake_percentages(amounts, [DailyValue(id=3, value=3)])[2] == 34

    def test_weekly_divides_by_seven_days(self):
        amounts = [0.0] * 33
        amounts[0] = 70.0
        percentages = intake_percentages(amounts, [DailyValue(id=1, value=10)], weekly=True)
        assert percentages[0] == 100


class TestCartNutrients:
    def test_multiplies_by_quantity(self, oat_milk):
        items = group_cart_items([oat_milk, oat_milk])
        entries = cart_nutrients(items)
        assert {"id": 1, "amount": 6.0} in entries
        assert {"id": 6, "amount": 200.0} in entries

    def test_drops_untracked_nutrients(self):
        items = group_cart_items([{
            "fdc_id": 1,
            "description": "Water",
            "food_nutrients": [{"nutrient_id": 1051, "name": "Water", "amount": 99.0}],
        }])
        assert cart_nutrients(items) == []


class TestBuildNutrientChart:
    def test_unavailable_without_daily_values(self):
        chart = build_nutrient_chart([{"id": 1, "amount": 10}], [])
        assert chart.available is False
        assert chart.message == UNAVAILABLE_MESSAGE
        assert chart.to_dict()["rows"] == []

    def test_rows(self):
        chart = build_nutrient_chart([{"id": 1, "amount": 78}], [DailyValue(id=1, value=78)])
        rows = chart.rows()
        assert len(rows) == 33
        assert rows[0] == {"id": 1, "label": "Fat", "amount": 78.0, "percentage": 100}
        assert rows[1]["percentage"] is None
        assert chart.reference == 100

    def test_weekly_flag(self):
        chart = build_nutrient_chart([{"id": 1, "amount": 78}], [DailyValue(id=1, value=78)], weekly=True)
        assert chart.weekly is True
        assert chart.percentages[0] == pytest.approx(15)
