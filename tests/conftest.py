"""Shared fixtures for the Graduation Outlook Dashboard tests."""

import json
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

# Ensure project root is importable
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from src.config import DashboardConfig
from src.data_loader import load_dataset


def make_record(unitid, year, name, state, sector, size, grad, rf, rf_risk, linear_risk,
                lon=-100.0, lat=40.0):
    return {
        "unitid": unitid,
        "year": year,
        "institution_name": name,
        "state": state,
        "sector": sector,
        "school_size_category": size,
        "longitude": lon,
        "latitude": lat,
        "actual_grad_rate": grad,
        "admission_rate": 0.65,
        "retention_rate": 0.8,
        "pell_percentage": 35.0,
        "student_faculty_ratio": 15.0,
        "spending_per_student": 12000.0,
        "predicted_grad_rate_linear": grad - 3.0,
        "risk_category_linear": linear_risk,
        "predicted_grad_rate_RandomForest": rf,
        "risk_category_RandomForest": rf_risk,
    }


SAMPLE_RECORDS = [
    make_record(1001, 2018, "Alpha State", "CA", "Public", "Medium", 55.0, 60.0, "Medium", "Low", -120.0, 37.0),
    make_record(1001, 2019, "Alpha State", "CA", "Public", "Medium", 58.0, 59.0, "Medium", "Low", -120.0, 37.0),
    make_record(1001, 2021, "Alpha State", "CA", "Public", "Medium", 61.0, 63.0, "Medium", "Low", -120.0, 37.0),
    make_record(1002, 2019, "Beta College", "NY", "Private nonprofit", "Large", 80.0, 78.0, "Low", "High", -74.0, 41.0),
    make_record(1002, 2020, "Beta College", "NY", "Private nonprofit", "Large", 82.0, 83.0, "Low", "High", -74.0, 41.0),
    make_record(1002, 2021, "Beta College", "NY", "Private nonprofit", "Large", 85.0, 84.0, "Low", "High", -74.0, 41.0),
    make_record(1003, 2020, "Gamma Institute", "TX", "For-profit", "Small", 30.0, 35.0, "High", "High", -97.0, 31.0),
    make_record(1003, 2021, "Gamma Institute", "TX", "For-profit", "Small", 32.0, 31.0, "High", "High", -97.0, 31.0),
    make_record(1004, 2021, "Delta University", "CA", "Private nonprofit", "Small", 70.0, 72.0, "Low", "Medium", -130.0, 35.0),
    make_record(1005, 2021, "Epsilon College", "NY", "Public", "Large", 45.0, 47.0, "Medium", "Medium", -76.0, 43.0),
]

SAMPLE_IMPORTANCE = {
    "2021": {
        "RandomForest": [
            {"feature_name": "retention_rate", "importance_value": 0.45},
            {"feature_name": "pell_percentage", "importance_value": 0.30},
            {"feature_name": "admission_rate", "importance_value": 0.25},
        ],
        "linear": [
            {"feature_name": "retention_rate", "importance_value": 0.6},
            {"feature_name": "spending_per_student", "importance_value": 0.4},
        ],
    },
    "2020": {
        "RandomForest": [
            {"feature_name": "retention_rate", "importance_value": 0.5},
        ],
    },
}


def write_inputs(directory: Path, records, importance) -> DashboardConfig:
    """Write both JSON inputs and return a config pointing at them."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "institutions.json").write_text(json.dumps(records))
    (directory / "feature_importance.json").write_text(json.dumps(importance))
    return DashboardConfig(data_dir=directory)


@pytest.fixture
def config(tmp_path):
    return write_inputs(tmp_path / "data", SAMPLE_RECORDS, SAMPLE_IMPORTANCE)


@pytest.fixture
def dataset(config):
    return load_dataset(config)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
