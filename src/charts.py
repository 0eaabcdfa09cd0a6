"""
src/charts.py

Purpose
-------
Figure builders for every drawing surface of the dashboard.

  - map           : plotly scatter on longitude/latitude (hover + click)
  - importance    : matplotlib horizontal bars
  - comparison    : matplotlib Actual vs Predicted bars
  - trend         : matplotlib line + points over an institution's years

Each builder takes the loaded Dataset plus the current FilterState (or the
values derived from it) and returns a brand-new figure. The Streamlit app
decides when to call them; nothing here holds state between calls.
"""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

import matplotlib.pyplot as plt
import pandas as pd
import plotly.graph_objects as go
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from src.config import DashboardConfig
from src.data_loader import Dataset, ModelFields
from src.filter_state import GRAD_RATE, FilterState
from src.profile import comparison_values, hover_text
from src.scales import ContinuousColorScale, OrdinalColorScale, extent


POINTS_TRACE = "Institutions"
BAR_PADDING = 0.3

ColorScale = Union[ContinuousColorScale, OrdinalColorScale]


# ---------------------------------------------------------------------
# Map
# ---------------------------------------------------------------------

def map_color_scale(
    filtered: pd.DataFrame,
    fields: ModelFields,
    outcome: str,
    config: DashboardConfig,
) -> ColorScale:
    """
    Continuous scale over the filtered predicted rates, or the fixed
    Low/Medium/High mapping for the risk outcome.

    An empty filtered frame gives a continuous scale with an empty domain.
    """
    if outcome == GRAD_RATE:
        values = filtered[fields.predicted] if not filtered.empty else []
        return ContinuousColorScale.from_values(values, config.grad_rate_colors)
    return OrdinalColorScale(dict(config.risk_colors))


def build_map_figure(
    dataset: Dataset,
    state: FilterState,
    config: Optional[DashboardConfig] = None,
) -> go.Figure:
    config = config or DashboardConfig()
    filtered = state.filtered
    outcome = state.selected_outcome
    fields = dataset.model_fields(state.selected_model)
    scale = map_color_scale(filtered, fields, outcome, config)

    fig = go.Figure()

    if not filtered.empty:
        value_col = fields.predicted if outcome == GRAD_RATE else fields.risk
        fig.add_trace(
            go.Scatter(
                x=filtered["longitude"].tolist(),
                y=filtered["latitude"].tolist(),
                mode="markers",
                name=POINTS_TRACE,
                marker=dict(
                    size=config.point_size,
                    color=[scale(v) for v in filtered[value_col]],
                    line=dict(width=0.5, color="white"),
                ),
                customdata=filtered[["unitid", "year"]].values.tolist(),
                hovertext=[
                    hover_text(dataset, row, state.selected_model, outcome)
                    for _, row in filtered.iterrows()
                ],
                hoverinfo="text",
                showlegend=False,
            )
        )

    # Legend-only traces: one square per colour-domain value, highest first.
    for label, color in scale.legend_entries():
        fig.add_trace(
            go.Scatter(
                x=[None],
                y=[None],
                mode="markers",
                name=label,
                marker=dict(size=12, symbol="square", color=color),
                hoverinfo="skip",
                showlegend=True,
            )
        )

    fig.update_layout(
        height=config.map_height,
        margin=dict(l=20, r=20, t=20, b=20),
        plot_bgcolor="white",
        clickmode="event+select",
        legend=dict(x=1, y=1, xanchor="right", yanchor="top", traceorder="normal"),
    )
    fig.update_xaxes(title_text="Longitude", range=list(config.lon_domain), showgrid=False)
    fig.update_yaxes(title_text="Latitude", range=list(config.lat_domain), showgrid=False)
    return fig


def plotted_points(fig: go.Figure) -> int:
    return sum(len(t.x) for t in fig.data if t.name == POINTS_TRACE)


def selected_key(points: List[dict], filtered: pd.DataFrame) -> Optional[Tuple[int, int]]:
    """
    The (unitid, year) of the first clicked institution point, if any.

    Points carry their key as custom data; when the event lacks it the point
    index into the filtered frame is used instead.
    """
    for point in points:
        if point.get("curve_number", 0) != 0:
            continue
        custom = point.get("customdata")
        if custom:
            return custom[0], int(custom[1])
        idx = point.get("point_index", point.get("point_number"))
        if idx is not None and 0 <= idx < len(filtered):
            row = filtered.iloc[idx]
            return row["unitid"], int(row["year"])
    return None


# ---------------------------------------------------------------------
# Feature importance
# ---------------------------------------------------------------------

def build_importance_figure(
    entries: List[Tuple[str, float]],
    config: Optional[DashboardConfig] = None,
) -> Figure:
    """One horizontal bar per feature; an empty list draws empty axes."""
    config = config or DashboardConfig()
    fig, ax = plt.subplots(figsize=(6, 5))

    if entries:
        names = [name for name, _ in entries]
        values = [value for _, value in entries]
        positions = range(len(entries))
        ax.barh(positions, values, height=1 - BAR_PADDING, color=config.bar_color)
        ax.set_yticks(list(positions))
        ax.set_yticklabels(names, fontsize=9)
        top = max(values)
        if top > 0:
            ax.set_xlim(0, top)

    ax.set_xlabel("Importance")
    ax.tick_params(axis="x", labelsize=9)
    fig.tight_layout()
    return fig


# ---------------------------------------------------------------------
# Selected institution
# ---------------------------------------------------------------------

def build_comparison_figure(
    dataset: Dataset,
    record: pd.Series,
    model: str,
    outcome: str,
    config: Optional[DashboardConfig] = None,
) -> Figure:
    config = config or DashboardConfig()
    bars = comparison_values(dataset, record, model, outcome, config.reference_model)

    fig, ax = plt.subplots(figsize=(4, 2.2))
    ax.bar([label for label, _ in bars], [value for _, value in bars],
           width=1 - BAR_PADDING, color=config.bar_color)
    ax.set_ylim(0, 100)
    ax.tick_params(labelsize=9)
    fig.tight_layout()
    return fig


def trend_domain(history: pd.DataFrame) -> Tuple[float, float]:
    """x-domain of the trend chart: this institution's own first and last year."""
    bounds = extent(history["year"])
    if bounds is None:
        raise ValueError("Institution has no records to plot.")
    return bounds


def build_trend_figure(
    dataset: Dataset,
    record: pd.Series,
    config: Optional[DashboardConfig] = None,
) -> Figure:
    config = config or DashboardConfig()
    history = dataset.history(record["unitid"])
    lo, hi = trend_domain(history)

    fig, ax = plt.subplots(figsize=(4, 2))
    ax.plot(history["year"], history["actual_grad_rate"], color=config.bar_color, linewidth=1.5)
    ax.scatter(history["year"], history["actual_grad_rate"], s=8, color=config.bar_color)

    if lo == hi:
        ax.set_xlim(lo - 0.5, hi + 0.5)
    else:
        ax.set_xlim(lo, hi)
    ax.set_ylim(0, 100)
    ax.xaxis.set_major_locator(MaxNLocator(integer=True))
    ax.tick_params(labelsize=8)
    fig.tight_layout()
    return fig
