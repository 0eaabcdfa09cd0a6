"""
src/filter_state.py

Purpose
-------
The dashboard's view state and the transitions that change it.

Every transition mutates a FilterState in place, recomputes the filtered
subset when the change affects it, and returns the set of views that must be
redrawn. Nothing here touches Streamlit or a figure, so the whole state
machine can be tested on a plain DataFrame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

import pandas as pd

from src.config import DashboardConfig
from src.data_loader import SECTORS, SIZES, Dataset


logger = logging.getLogger(__name__)

GRAD_RATE = "grad_rate"
RISK = "risk"
OUTCOMES = (GRAD_RATE, RISK)

# View names double as the Streamlit keys of the drawing surfaces.
MAP = "map-svg"
IMPORTANCE = "importance-svg"
COMPARISON = "comparison-svg"
TREND = "trend-svg"
PROFILE = "profile"
WHATIF = "whatif"

FILTER_VIEWS = frozenset({MAP, IMPORTANCE})
SELECTION_VIEWS = frozenset({PROFILE, COMPARISON, TREND, WHATIF})
ALL_VIEWS = FILTER_VIEWS | SELECTION_VIEWS


@dataclass
class FilterState:
    selected_year: int
    selected_model: str
    selected_outcome: str = GRAD_RATE
    selected_state: str = ""
    sectors: List[str] = field(default_factory=lambda: list(SECTORS))
    sizes: List[str] = field(default_factory=lambda: list(SIZES))
    selected_institution: Optional[pd.Series] = None
    filtered: pd.DataFrame = field(default_factory=pd.DataFrame)


def filter_institutions(
    institutions: pd.DataFrame,
    year: int,
    sectors: Iterable[str],
    state: str,
    sizes: Iterable[str],
) -> pd.DataFrame:
    """
    Rows matching year, sector membership, state (empty = any) and size
    membership, in their original order.
    """
    mask = (
        (institutions["year"] == year)
        & institutions["sector"].isin(list(sectors))
        & institutions["school_size_category"].isin(list(sizes))
    )
    if state:
        mask &= institutions["state"] == state
    return institutions[mask]


def apply_filters(dataset: Dataset, state: FilterState) -> pd.DataFrame:
    state.filtered = filter_institutions(
        dataset.institutions,
        state.selected_year,
        state.sectors,
        state.selected_state,
        state.sizes,
    )
    return state.filtered


def initial_state(dataset: Dataset, config: Optional[DashboardConfig] = None) -> FilterState:
    """Latest year, every sector and size, no state filter, nothing selected."""
    config = config or DashboardConfig()

    model = config.default_model
    if model not in dataset.models:
        fallback = next(iter(dataset.models))
        logger.warning("Default model %r not in data; using %r", model, fallback)
        model = fallback

    state = FilterState(selected_year=dataset.years[-1], selected_model=model)
    apply_filters(dataset, state)
    return state


# ---------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------

def set_year(dataset: Dataset, state: FilterState, year: int) -> FrozenSet[str]:
    state.selected_year = int(year)
    apply_filters(dataset, state)
    return FILTER_VIEWS


def set_model(dataset: Dataset, state: FilterState, model: str) -> FrozenSet[str]:
    """Changing model recolours nothing on the map until the next filter change."""
    dataset.model_fields(model)
    state.selected_model = model
    if state.selected_institution is None:
        return frozenset({IMPORTANCE})
    return frozenset({IMPORTANCE, COMPARISON})


def set_outcome(dataset: Dataset, state: FilterState, outcome: str) -> FrozenSet[str]:
    if outcome not in OUTCOMES:
        raise ValueError(f"Unknown outcome {outcome!r}; expected one of {OUTCOMES}")
    state.selected_outcome = outcome
    apply_filters(dataset, state)
    return FILTER_VIEWS


def set_state(dataset: Dataset, state: FilterState, code: str) -> FrozenSet[str]:
    state.selected_state = code or ""
    apply_filters(dataset, state)
    return FILTER_VIEWS


def set_sectors(dataset: Dataset, state: FilterState, sectors: Iterable[str]) -> FrozenSet[str]:
    state.sectors = list(sectors)
    apply_filters(dataset, state)
    return FILTER_VIEWS


def set_sizes(dataset: Dataset, state: FilterState, sizes: Iterable[str]) -> FrozenSet[str]:
    state.sizes = list(sizes)
    apply_filters(dataset, state)
    return FILTER_VIEWS


def select_institution(dataset: Dataset, state: FilterState, unitid, year: int) -> FrozenSet[str]:
    """
    Select one institution-year by its identity key.

    Raises
    ------
    KeyError
        If no record has that (unitid, year).
    """
    df = dataset.institutions
    rows = df[(df["unitid"] == unitid) & (df["year"] == int(year))]
    if rows.empty:
        raise KeyError((unitid, year))
    state.selected_institution = rows.iloc[0]
    return SELECTION_VIEWS
