"""
src/controls.py

Purpose
-------
The Dashboard controller binds each UI control to one state transition and
keeps the most recently built figure for every drawing surface.

A handler applies its transition, marks the returned views dirty, and the
next call to figure() rebuilds only those. Views that were not marked keep
their previous figure, e.g. the map is not recoloured when only the model
changes.

One Dashboard lives in st.session_state per browser session; tests build one
directly from a Dataset.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, Optional, Set

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from src import charts
from src.config import DashboardConfig
from src.data_loader import Dataset
from src.filter_state import (
    ALL_VIEWS,
    COMPARISON,
    IMPORTANCE,
    MAP,
    TREND,
    FilterState,
    initial_state,
    select_institution,
    set_model,
    set_outcome,
    set_sectors,
    set_sizes,
    set_state,
    set_year,
)
from src.whatif import Scenario


logger = logging.getLogger(__name__)


class Dashboard:
    def __init__(self, dataset: Dataset, config: Optional[DashboardConfig] = None):
        self.dataset = dataset
        self.config = config or DashboardConfig()
        self.state: FilterState = initial_state(dataset, self.config)
        self.scenario: Optional[Scenario] = None
        self.dirty: Set[str] = set(ALL_VIEWS)
        self._figures: Dict[str, object] = {}

    # -----------------------------------------------------------------
    # Control handlers
    # -----------------------------------------------------------------

    def _mark(self, views: FrozenSet[str]) -> FrozenSet[str]:
        self.dirty |= views
        return views

    def on_year(self, year: int) -> FrozenSet[str]:
        return self._mark(set_year(self.dataset, self.state, year))

    def on_model(self, model: str) -> FrozenSet[str]:
        return self._mark(set_model(self.dataset, self.state, model))

    def on_outcome(self, outcome: str) -> FrozenSet[str]:
        return self._mark(set_outcome(self.dataset, self.state, outcome))

    def on_state(self, code: str) -> FrozenSet[str]:
        return self._mark(set_state(self.dataset, self.state, code))

    def on_sectors(self, sectors: Iterable[str]) -> FrozenSet[str]:
        return self._mark(set_sectors(self.dataset, self.state, sectors))

    def on_sizes(self, sizes: Iterable[str]) -> FrozenSet[str]:
        return self._mark(set_sizes(self.dataset, self.state, sizes))

    def on_select(self, unitid, year: int) -> FrozenSet[str]:
        views = select_institution(self.dataset, self.state, unitid, year)
        self.scenario = Scenario(self.state.selected_institution)
        logger.info("Selected institution %s (%s)", unitid, year)
        return self._mark(views)

    def on_slider(self, key: str, value: float) -> str:
        """Update one what-if value; returns its new label."""
        label = self.scenario.adjust(key, value)
        self._mark(frozenset({COMPARISON}))
        return label

    def on_reset(self) -> Dict[str, float]:
        values = self.scenario.reset()
        self._mark(frozenset({COMPARISON}))
        return values

    # -----------------------------------------------------------------
    # Rendering
    # -----------------------------------------------------------------

    def _build(self, view: str):
        state = self.state
        if view == MAP:
            return charts.build_map_figure(self.dataset, state, self.config)
        if view == IMPORTANCE:
            entries = self.dataset.importance_for(state.selected_year, state.selected_model)
            return charts.build_importance_figure(entries, self.config)

        record = state.selected_institution
        if record is None:
            return None
        if view == COMPARISON:
            return charts.build_comparison_figure(
                self.dataset, record, state.selected_model, state.selected_outcome, self.config
            )
        if view == TREND:
            return charts.build_trend_figure(self.dataset, record, self.config)
        return None

    def figure(self, view: str):
        """The figure for a surface, rebuilt only if the view is dirty."""
        if view in self.dirty or view not in self._figures:
            old = self._figures.get(view)
            if isinstance(old, Figure):
                plt.close(old)
            self._figures[view] = self._build(view)
            self.dirty.discard(view)
        return self._figures[view]
