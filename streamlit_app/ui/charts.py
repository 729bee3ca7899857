"""
Chart builders for the nutrient intake view.

The nutrient chart is a horizontal bar chart: one bar per nutrient showing the
percent of the daily (or weekly) value reached by the cart, and a vertical
rule at 100 % marking the standard.
"""

from typing import Any, Dict, List

import altair as alt
import pandas as pd


# Muted, accessible palette
COLORS = {
    "under": "#3b82f6",     # Muted blue
    "over": "#ef4444",      # Red
    "reference": "#1e293b", # Dark slate
    "text": "#1e293b",
    "background": "#ffffff",
    "grid": "#f1f5f9",
}


def apply_modern_theme(chart: alt.Chart) -> alt.Chart:
    """
    Apply the shared theme to an Altair chart.

    Args:
        chart: Altair chart to theme

    Returns:
        Themed chart with consistent styling
    """
    return chart.configure_view(
        strokeWidth=0,
        fill=COLORS["background"],
    ).configure_axis(
        grid=True,
        gridColor=COLORS["grid"],
        gridOpacity=0.3,
        domain=False,
        labelColor=COLORS["text"],
        labelFontSize=11,
        titleColor=COLORS["text"],
        titleFontSize=12,
        titleFontWeight="normal",
        ticks=False,
    ).configure(
        background=COLORS["background"],
    )


def nutrient_rows_to_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Turn NutrientChartResponse rows into a DataFrame for plotting.

    Nutrients without a daily value (percentage None) are dropped.
    """
    df = pd.DataFrame(rows, columns=["id", "label", "amount", "percentage"])
    df = df.dropna(subset=["percentage"])
    df["percentage"] = df["percentage"].astype(int)
    df["status"] = df["percentage"].apply(lambda p: "over" if p > 100 else "under")
    return df


def build_nutrient_chart(rows: List[Dict[str, Any]], reference: int = 100, weekly: bool = False) -> alt.Chart:
    """
    Build the horizontal nutrient intake bar chart.

    Args:
        rows: Rows of the nutrient chart response (id, label, amount, percentage)
        reference: Percentage of the standard line (default 100)
        weekly: Only changes the axis title

    Returns:
        Themed layered chart (bars + reference rule)
    """
    df = nutrient_rows_to_frame(rows)
    period = "weekly" if weekly else "daily"

    bars = alt.Chart(df).mark_bar(cornerRadiusEnd=3).encode(
        x=alt.X("percentage:Q", title=f"% of {period} value"),
        y=alt.Y("label:N", sort=alt.SortField("id"), title=None),
        color=alt.Color(
            "status:N",
            scale=alt.Scale(domain=["under", "over"], range=[COLORS["under"], COLORS["over"]]),
            legend=None,
        ),
        tooltip=[
            alt.Tooltip("label:N", title="Nutrient"),
            alt.Tooltip("amount:Q", title="Amount", format=".1f"),
            alt.Tooltip("percentage:Q", title="%"),
        ],
    )

    rule = alt.Chart(pd.DataFrame({"reference": [reference]})).mark_rule(
        color=COLORS["reference"],
        strokeDash=[4, 4],
    ).encode(
        x="reference:Q",
        tooltip=alt.Tooltip("reference:Q", title="Standard"),
    )

    chart = (bars + rule).properties(height=max(200, 18 * len(df)))
    return apply_modern_theme(chart)
