"""
src/make_synthetic_data.py

Creates a realistic-looking synthetic institutions dataset plus matching
feature-importance tables, so the dashboard runs without real IPEDS exports.

Nothing is trained here: each model's "prediction" is the actual graduation
rate plus model-specific noise, and importances are random weights.

Outputs:
  data/institutions.json
  data/feature_importance.json

Run
---
python -m src.make_synthetic_data
python -m src.make_synthetic_data --n-institutions 500 --out-dir data
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd

from src.data_loader import SECTORS, SIZES


DEFAULT_OUT_DIR = Path("data")
YEARS = [2018, 2019, 2020, 2021, 2022]
# Noise (in grad-rate points) each pseudo-model adds on top of the actual rate.
MODEL_NOISE = {"linear": 9.0, "RandomForest": 5.0, "GradientBoosting": 4.0}
FEATURES = [
    "retention_rate",
    "pell_percentage",
    "admission_rate",
    "spending_per_student",
    "student_faculty_ratio",
    "sector",
    "school_size_category",
]

# (state, approx. longitude, approx. latitude)
STATES = [
    ("CA", -119.4, 36.8), ("NY", -75.5, 42.9), ("TX", -99.3, 31.5), ("FL", -81.7, 28.1),
    ("IL", -89.2, 40.0), ("PA", -77.6, 40.9), ("OH", -82.8, 40.3), ("MA", -71.8, 42.3),
    ("GA", -83.4, 32.7), ("WA", -120.5, 47.4), ("CO", -105.5, 39.0), ("MN", -94.3, 46.3),
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate synthetic dashboard data.")
    parser.add_argument("--out-dir", type=str, default=str(DEFAULT_OUT_DIR),
                        help="Directory to write the two JSON files into.")
    parser.add_argument("--n-institutions", type=int, default=300,
                        help="Number of distinct institutions.")
    parser.add_argument("--random-state", type=int, default=42,
                        help="Random seed for reproducibility.")
    return parser.parse_args()


def risk_category(rate: np.ndarray) -> np.ndarray:
    """High below 40%, Medium below 60%, Low otherwise."""
    return np.select([rate < 40, rate < 60], ["High", "Medium"], default="Low")


def generate_institutions(n_institutions: int = 300, random_state: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(random_state)

    # --- Static institution profile
    state_idx = rng.integers(0, len(STATES), size=n_institutions)
    sector = rng.choice(SECTORS, size=n_institutions, p=[0.5, 0.35, 0.15])
    size = rng.choice(SIZES, size=n_institutions, p=[0.4, 0.35, 0.25])
    lon = np.array([STATES[i][1] for i in state_idx]) + rng.normal(0, 1.5, n_institutions)
    lat = np.array([STATES[i][2] for i in state_idx]) + rng.normal(0, 1.0, n_institutions)

    base_admission = np.clip(rng.beta(5, 3, n_institutions), 0.05, 1.0)
    base_pell = np.clip(rng.normal(35, 12, n_institutions), 5, 90)
    base_ratio = np.clip(rng.normal(16, 5, n_institutions), 5, 40)
    base_spend = np.clip(rng.normal(14000, 5000, n_institutions), 5000, 30000)

    rows: List[Dict] = []
    for i in range(n_institutions):
        # Some institutions miss a year; trend charts must cope with gaps.
        years = [y for y in YEARS if rng.random() > 0.1] or [YEARS[-1]]
        for year in years:
            drift = (year - YEARS[0]) * rng.normal(0.3, 0.5)
            admission = float(np.clip(base_admission[i] + rng.normal(0, 0.02), 0.02, 1.0))
            pell = float(np.clip(base_pell[i] + rng.normal(0, 1.5), 0, 100))
            ratio = float(np.clip(base_ratio[i] + rng.normal(0, 0.5), 5, 40))
            spend = float(np.clip(base_spend[i] + rng.normal(0, 400), 5000, 30000))
            retention = float(np.clip(0.95 - 0.004 * pell - 0.1 * admission + rng.normal(0, 0.04), 0.3, 0.99))

            grad = (
                + 100 * retention - 25
                - 0.15 * pell
                + 0.0004 * spend
                - 0.3 * ratio
                + (8 if sector[i] == "Private nonprofit" else -10 if sector[i] == "For-profit" else 0)
                + drift
                + rng.normal(0, 4)
            )
            grad = float(np.clip(grad, 5, 98))

            row = {
                "unitid": 100000 + i,
                "year": year,
                "institution_name": f"{STATES[state_idx[i]][0]} {['College', 'University', 'Institute'][i % 3]} {i:03d}",
                "state": STATES[state_idx[i]][0],
                "sector": str(sector[i]),
                "school_size_category": str(size[i]),
                "longitude": round(float(lon[i]), 4),
                "latitude": round(float(lat[i]), 4),
                "actual_grad_rate": round(grad, 1),
                "admission_rate": round(admission, 3),
                "retention_rate": round(retention, 3),
                "pell_percentage": round(pell, 1),
                "student_faculty_ratio": round(ratio, 1),
                "spending_per_student": round(spend, 0),
            }
            for model, noise in MODEL_NOISE.items():
                predicted = float(np.clip(grad + rng.normal(0, noise), 0, 100))
                row[f"predicted_grad_rate_{model}"] = round(predicted, 1)
                row[f"risk_category_{model}"] = str(risk_category(np.array([predicted]))[0])
            rows.append(row)

    return pd.DataFrame(rows)


def generate_feature_importance(years: List[int], random_state: int = 42) -> Dict[str, Dict[str, List[Dict]]]:
    """{year: {model: [{feature_name, importance_value}, ...]}}, largest first."""
    rng = np.random.default_rng(random_state + 1)
    out: Dict[str, Dict[str, List[Dict]]] = {}
    for year in years:
        out[str(year)] = {}
        for model in MODEL_NOISE:
            weights = rng.dirichlet(np.ones(len(FEATURES)) * 2)
            order = np.argsort(-weights)
            out[str(year)][model] = [
                {"feature_name": FEATURES[j], "importance_value": round(float(weights[j]), 4)}
                for j in order
            ]
    return out


def main() -> None:
    args = parse_args()
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    df = generate_institutions(args.n_institutions, args.random_state)
    importance = generate_feature_importance(sorted(df["year"].unique().tolist()), args.random_state)

    inst_path = out_dir / "institutions.json"
    inst_path.write_text(df.to_json(orient="records", indent=2))
    imp_path = out_dir / "feature_importance.json"
    imp_path.write_text(json.dumps(importance, indent=2))

    # Print quick quality checks
    print(f"Wrote {len(df)} rows to {inst_path}")
    print(f"Wrote importances for {len(importance)} years to {imp_path}")
    print("Risk mix (RandomForest):", df["risk_category_RandomForest"].value_counts().to_dict())


if __name__ == "__main__":
    main()
