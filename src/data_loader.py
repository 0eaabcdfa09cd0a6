"""
src/data_loader.py

Purpose
-------
Centralizes load-time logic for the dashboard: reading the two JSON inputs,
checking their shape, and building the explicit model -> column mapping.
The Streamlit app only ever sees a validated Dataset.

Inputs expected in data/:
  - institutions.json        : array of institution-year records
  - feature_importance.json  : {year: {model: [{feature_name, importance_value}]}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from src.config import DashboardConfig


logger = logging.getLogger(__name__)

PREDICTED_PREFIX = "predicted_grad_rate_"
RISK_PREFIX = "risk_category_"

SECTORS = ["Public", "Private nonprofit", "For-profit"]
SIZES = ["Small", "Medium", "Large"]
RISK_LEVELS = ["Low", "Medium", "High"]

REQUIRED_COLUMNS = [
    "unitid",
    "year",
    "institution_name",
    "state",
    "sector",
    "school_size_category",
    "longitude",
    "latitude",
    "actual_grad_rate",
    "admission_rate",
    "retention_rate",
    "pell_percentage",
    "student_faculty_ratio",
    "spending_per_student",
]

NUMERIC_COLUMNS = [
    "longitude",
    "latitude",
    "actual_grad_rate",
    "admission_rate",
    "retention_rate",
    "pell_percentage",
    "student_faculty_ratio",
    "spending_per_student",
]

# year -> model -> [(feature_name, importance_value), ...]
FeatureImportance = Dict[int, Dict[str, List[Tuple[str, float]]]]


class DataLoadError(ValueError):
    """An input file exists but its content cannot be used."""


class UnknownModelError(KeyError):
    """A model name has no prediction columns in the loaded data."""


@dataclass(frozen=True)
class ModelFields:
    """The pair of columns holding one model's outputs."""
    predicted: str
    risk: str


@dataclass(frozen=True)
class Dataset:
    """
    Everything loaded at startup, kept together and never mutated.

    institutions : one row per (unitid, year)
    feature_importance : ordered (feature, value) pairs per (year, model)
    models : model name -> ModelFields, in column order
    years, states : sorted distinct values from institutions
    """
    institutions: pd.DataFrame
    feature_importance: FeatureImportance
    models: Dict[str, ModelFields]
    years: List[int]
    states: List[str]

    def model_fields(self, model: str) -> ModelFields:
        try:
            return self.models[model]
        except KeyError:
            raise UnknownModelError(model) from None

    def importance_for(self, year: int, model: str) -> List[Tuple[str, float]]:
        """Absent (year, model) pairs are an empty list, not an error."""
        return self.feature_importance.get(year, {}).get(model, [])

    def history(self, unitid) -> pd.DataFrame:
        """All years on record for one institution, oldest first."""
        rows = self.institutions[self.institutions["unitid"] == unitid]
        return rows.sort_values("year")


def _read_json(path: Path):
    if not path.exists():
        raise FileNotFoundError(
            f"Missing {path}. Generate demo data first (python -m src.make_synthetic_data)."
        )
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise DataLoadError(f"{path} is not valid JSON: {e}") from e


def discover_models(columns) -> Dict[str, ModelFields]:
    """
    Build the model -> ModelFields mapping from the institution columns.

    Raises
    ------
    DataLoadError
        If no model columns exist, or a model has only one of its two columns.
    """
    predicted = [c[len(PREDICTED_PREFIX):] for c in columns if c.startswith(PREDICTED_PREFIX)]
    risk = {c[len(RISK_PREFIX):] for c in columns if c.startswith(RISK_PREFIX)}

    unpaired = sorted(set(predicted) ^ risk)
    if unpaired:
        raise DataLoadError(f"Models missing a predicted or risk column: {unpaired}")
    if not predicted:
        raise DataLoadError(
            f"No model columns found (expected {PREDICTED_PREFIX}<model> / {RISK_PREFIX}<model>)."
        )

    return {m: ModelFields(PREDICTED_PREFIX + m, RISK_PREFIX + m) for m in predicted}


def check_model_columns(df: pd.DataFrame, models: Dict[str, ModelFields]) -> None:
    """
    Every record needs a numeric predicted rate and a known risk category
    for every model; the map colours each point from these.
    """
    for model, fields in models.items():
        try:
            df[fields.predicted] = pd.to_numeric(df[fields.predicted])
        except (TypeError, ValueError) as e:
            raise DataLoadError(f"Column {fields.predicted!r} is not numeric: {e}") from e
        if df[fields.predicted].isna().any():
            raise DataLoadError(f"Column {fields.predicted!r} has missing values.")

        values = df[fields.risk]
        if values.isna().any():
            raise DataLoadError(f"Column {fields.risk!r} has missing values.")
        bad = sorted(set(values) - set(RISK_LEVELS), key=str)
        if bad:
            raise DataLoadError(f"Unexpected risk categories for {model}: {bad}")


def validate_institutions(records) -> pd.DataFrame:
    """
    Turn the raw institutions array into a checked DataFrame.

    Checks that every required column is present and that the numeric columns
    really are numeric. Record values are not otherwise reconciled.
    """
    if not isinstance(records, list):
        raise DataLoadError("institutions.json must contain a JSON array of records.")

    df = pd.DataFrame.from_records(records)
    if df.empty:
        raise DataLoadError("institutions.json contains no records.")

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataLoadError(f"Missing required columns: {missing}")

    try:
        year = pd.to_numeric(df["year"])
    except (TypeError, ValueError) as e:
        raise DataLoadError(f"Column 'year' is not numeric: {e}") from e
    if year.isna().any() or (year % 1 != 0).any():
        raise DataLoadError("Column 'year' must hold whole years with no missing values.")
    df["year"] = year.astype(int)

    for c in NUMERIC_COLUMNS:
        try:
            df[c] = pd.to_numeric(df[c])
        except (TypeError, ValueError) as e:
            raise DataLoadError(f"Column {c!r} is not numeric: {e}") from e

    return df


def parse_feature_importance(raw) -> FeatureImportance:
    """Normalize keys to int years and entries to (name, value) tuples."""
    if not isinstance(raw, dict):
        raise DataLoadError("feature_importance.json must contain a JSON object keyed by year.")

    out: FeatureImportance = {}
    try:
        for year, by_model in raw.items():
            out[int(year)] = {
                model: [(e["feature_name"], float(e["importance_value"])) for e in entries]
                for model, entries in by_model.items()
            }
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise DataLoadError(f"Malformed feature importance entry: {e!r}") from e
    return out


def load_dataset(config: Optional[DashboardConfig] = None) -> Dataset:
    """
    Load and validate both inputs.

    Institutions are read first, feature importance second; a failure in
    either aborts the whole load.

    Raises
    ------
    FileNotFoundError
        If either input file is missing.
    DataLoadError
        If either file cannot be parsed or has the wrong shape.
    """
    config = config or DashboardConfig()

    institutions = validate_institutions(_read_json(config.institutions_path))
    models = discover_models(institutions.columns)
    check_model_columns(institutions, models)
    importance = parse_feature_importance(_read_json(config.feature_importance_path))

    years = sorted(int(y) for y in institutions["year"].unique())
    states = sorted(str(s) for s in institutions["state"].unique())

    logger.info(
        "Loaded %d institution records (years %s, models %s)",
        len(institutions), years, list(models),
    )
    return Dataset(
        institutions=institutions,
        feature_importance=importance,
        models=models,
        years=years,
        states=states,
    )
