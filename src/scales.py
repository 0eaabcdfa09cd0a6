"""
src/scales.py

Small scale helpers shared by the chart builders: a linear scale, an extent
helper, and the two colour scales used on the map. Both colour scales accept
an empty domain so an empty filter result can still be drawn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from plotly.colors import find_intermediate_color, hex_to_rgb


def extent(values: Iterable[float]) -> Optional[Tuple[float, float]]:
    """(min, max) ignoring NaN, or None when there is nothing to measure."""
    arr = np.asarray(list(values), dtype=float)
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        return None
    return float(arr.min()), float(arr.max())


@dataclass(frozen=True)
class LinearScale:
    domain: Tuple[float, float]
    range: Tuple[float, float] = (0.0, 1.0)

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            # Degenerate domain maps everything onto the start of the range.
            return r0
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)


def _to_hex(rgb: Sequence[float]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*(int(round(c)) for c in rgb))


@dataclass(frozen=True)
class ContinuousColorScale:
    """
    Linear interpolation between two colours over [min, max] of the data.

    domain is empty when built from no values; calling the scale is then
    never needed because there are no points to colour.
    """
    domain: Tuple[float, ...]
    colors: Tuple[str, str]

    @classmethod
    def from_values(cls, values: Iterable[float], colors: Tuple[str, str]) -> "ContinuousColorScale":
        bounds = extent(values)
        return cls(domain=bounds if bounds else (), colors=colors)

    def __call__(self, value: float) -> str:
        if not self.domain:
            raise ValueError("Cannot colour a value with an empty domain.")
        t = LinearScale(self.domain)(value)
        t = min(max(t, 0.0), 1.0)
        low, high = (hex_to_rgb(c) for c in self.colors)
        return _to_hex(find_intermediate_color(low, high, t))

    def legend_entries(self) -> List[Tuple[str, str]]:
        """(label, colour) pairs, highest value first."""
        return [(f"{v:.1f}", self(v)) for v in reversed(self.domain)]


@dataclass(frozen=True)
class OrdinalColorScale:
    mapping: Dict[str, str]

    @property
    def domain(self) -> Tuple[str, ...]:
        return tuple(self.mapping)

    def __call__(self, value: str) -> str:
        return self.mapping[value]

    def legend_entries(self) -> List[Tuple[str, str]]:
        return [(v, self.mapping[v]) for v in reversed(self.domain)]
