"""
src/profile.py

Values shown for one selected institution: the profile card fields, the
actual-vs-predicted pair for the comparison chart, and the hover text used on
the map.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import pandas as pd

from src.data_loader import Dataset, UnknownModelError
from src.filter_state import GRAD_RATE


# Risk categories charted on the 0-100 comparison axis.
RISK_PLACEHOLDER = {"Low": 75, "Medium": 50, "High": 25}
# Used for the actual bar when the reference model is absent.
RISK_FALLBACK = 50


def profile_fields(record: pd.Series) -> Dict[str, str]:
    return {
        "Name": str(record["institution_name"]),
        "State": str(record["state"]),
        "Sector": str(record["sector"]),
        "Size": str(record["school_size_category"]),
    }


def risk_placeholder(category) -> int:
    """Low -> 75, Medium -> 50, anything else -> 25."""
    if category == "Low":
        return RISK_PLACEHOLDER["Low"]
    if category == "Medium":
        return RISK_PLACEHOLDER["Medium"]
    return RISK_PLACEHOLDER["High"]


def comparison_values(
    dataset: Dataset,
    record: pd.Series,
    model: str,
    outcome: str,
    reference_model: str = "linear",
) -> List[Tuple[str, float]]:
    """
    The two bars of the comparison chart.

    For the graduation-rate outcome these are the raw percentages. For the
    risk outcome both categories are mapped onto RISK_PLACEHOLDER; the actual
    bar uses the reference model's category.
    """
    fields = dataset.model_fields(model)

    if outcome == GRAD_RATE:
        return [
            ("Actual", float(record["actual_grad_rate"])),
            ("Predicted", float(record[fields.predicted])),
        ]

    try:
        reference = record[dataset.model_fields(reference_model).risk]
    except UnknownModelError:
        reference = None
    if reference is None or pd.isna(reference) or reference == "":
        actual = RISK_FALLBACK
    else:
        actual = risk_placeholder(reference)

    return [
        ("Actual", actual),
        ("Predicted", risk_placeholder(record[fields.risk])),
    ]


def predicted_label(dataset: Dataset, record: pd.Series, model: str, outcome: str) -> str:
    fields = dataset.model_fields(model)
    if outcome == GRAD_RATE:
        return f"Predicted: {record[fields.predicted]:.1f}%"
    return f"Predicted: {record[fields.risk]}"


def hover_text(dataset: Dataset, record: pd.Series, model: str, outcome: str) -> str:
    return (
        f"<b>{record['institution_name']}</b><br>"
        f"State: {record['state']}<br>"
        f"Actual Grad Rate: {record['actual_grad_rate']:.1f}%<br>"
        f"{predicted_label(dataset, record, model, outcome)}"
    )
