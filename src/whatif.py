"""
src/whatif.py

The what-if scenario panel: five sliders seeded from the selected
institution's raw feature values.

Slider values only change their own labels. No client-side scoring exists,
so the comparison chart keeps reading the stored record.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List

import pandas as pd


@dataclass(frozen=True)
class SliderSpec:
    key: str
    field: str
    label: str
    min_value: float
    max_value: float
    step: float
    fmt: Callable[[float], str]

    def clamp(self, value: float) -> float:
        return min(max(float(value), self.min_value), self.max_value)

    def format(self, value: float) -> str:
        return self.fmt(float(value))


SLIDERS: List[SliderSpec] = [
    SliderSpec("pell-slider", "pell_percentage", "Pell %", 0.0, 100.0, 0.1,
               lambda v: f"{v:.1f}%"),
    SliderSpec("admission-slider", "admission_rate", "Admission Rate", 0.0, 1.0, 0.01,
               lambda v: f"{v * 100:.1f}%"),
    SliderSpec("retention-slider", "retention_rate", "Retention Rate", 0.0, 1.0, 0.01,
               lambda v: f"{v * 100:.1f}%"),
    SliderSpec("ratio-slider", "student_faculty_ratio", "Student-Faculty Ratio", 5.0, 40.0, 0.1,
               lambda v: f"{v:.1f}"),
    SliderSpec("spend-slider", "spending_per_student", "Spending per Student", 5000.0, 30000.0, 500.0,
               lambda v: f"${v:.0f}"),
]


def seed_values(record: pd.Series) -> Dict[str, float]:
    """Slider key -> starting value, clamped into the slider's range."""
    return {s.key: s.clamp(record[s.field]) for s in SLIDERS}


def format_labels(values: Dict[str, float]) -> Dict[str, str]:
    return {s.key: s.format(values[s.key]) for s in SLIDERS}


class Scenario:
    """Current slider values for one selected institution."""

    def __init__(self, record: pd.Series):
        self.record = record
        self.original = seed_values(record)
        self.values = dict(self.original)

    def adjust(self, key: str, value: float) -> str:
        """Store a new slider value and return its formatted label."""
        spec = next((s for s in SLIDERS if s.key == key), None)
        if spec is None:
            raise KeyError(key)
        self.values[key] = spec.clamp(value)
        return spec.format(self.values[key])

    def reset(self) -> Dict[str, float]:
        self.values = dict(self.original)
        return dict(self.values)

    @property
    def labels(self) -> Dict[str, str]:
        return format_labels(self.values)
