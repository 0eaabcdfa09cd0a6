"""
src/config.py

Purpose
-------
Dashboard settings in one place: where the data lives, which model is shown
first, map domains and the colour palette.

Defaults reproduce the original dashboard. A JSON file can override any field:

    {"default_model": "GradientBoosting", "map_height": 600}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, Optional, Tuple


DEFAULT_DATA_DIR = Path("data")
DEFAULT_CONFIG_PATH = Path("config.json")


@dataclass(frozen=True)
class DashboardConfig:
    data_dir: Path = DEFAULT_DATA_DIR
    institutions_file: str = "institutions.json"
    feature_importance_file: str = "feature_importance.json"

    default_model: str = "RandomForest"
    # Model whose risk category stands in for the "actual" risk bar.
    reference_model: str = "linear"

    lon_domain: Tuple[float, float] = (-125.0, -66.0)
    lat_domain: Tuple[float, float] = (24.0, 50.0)
    map_height: int = 500
    point_size: int = 8

    grad_rate_colors: Tuple[str, str] = ("#ffffcc", "#0051ba")
    risk_colors: Dict[str, str] = field(
        default_factory=lambda: {"Low": "#2ca02c", "Medium": "#ff7f0e", "High": "#d62728"}
    )
    bar_color: str = "#0066cc"

    @property
    def institutions_path(self) -> Path:
        return Path(self.data_dir) / self.institutions_file

    @property
    def feature_importance_path(self) -> Path:
        return Path(self.data_dir) / self.feature_importance_file


def load_config(path: Optional[Path] = DEFAULT_CONFIG_PATH) -> DashboardConfig:
    """
    Build a DashboardConfig, applying overrides from a JSON file if it exists.

    Raises
    ------
    ValueError
        If the file is not a JSON object or names an unknown setting.
    """
    config = DashboardConfig()
    if path is None or not Path(path).exists():
        return config

    overrides = json.loads(Path(path).read_text())
    if not isinstance(overrides, dict):
        raise ValueError(f"{path} must contain a JSON object of settings.")

    known = {f.name for f in fields(DashboardConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown settings in {path}: {unknown}")

    # JSON has no tuples or paths; coerce back to the dataclass field types.
    if "data_dir" in overrides:
        overrides["data_dir"] = Path(overrides["data_dir"])
    for key in ("lon_domain", "lat_domain", "grad_rate_colors"):
        if key in overrides:
            overrides[key] = tuple(overrides[key])

    return replace(config, **overrides)
