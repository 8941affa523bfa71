from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

EVENTS = ["Baseline", "Week 6"]
LEVELS = ["No problems", "Some problems", "Severe problems"]


@pytest.fixture
def visits() -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "individual_id": [1, 1, 2, 2, 3, 3, 4, 4, 1],
            "group": ["Drug", "Drug", "Drug", "Drug", "Placebo", "Placebo", "Placebo", "Placebo", "Drug"],
            "event_name": ["Baseline", "Week 6"] * 4 + ["Baseline"],
            "weight_kg": [71.5, 70.2, 88.0, 86.4, 65.1, 65.9, 92.3, 93.0, 71.5],
            "pain_score": [6, 4, 7, 5, 6, 6, 3, 4, 6],
            "eq5d_mobility": [
                "Some problems", "No problems", "Severe problems", "Some problems",
                "No problems", "No problems", "Some problems", "Some problems", "Some problems",
            ],
            "eq5d_self_care": ["No problems", "No problems", None, "Some problems",
                               "No problems", "Some problems", "No problems", "No problems", "No problems"],
            "visit_date": pd.to_datetime(["2024-01-05", "2024-02-16"] * 4 + ["2024-01-05"]),
        }
    )
    df["event_name"] = pd.Categorical(df["event_name"], categories=EVENTS, ordered=True)
    df["eq5d_mobility"] = pd.Categorical(df["eq5d_mobility"], categories=LEVELS)
    return df


@pytest.fixture
def lookup() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "identifier": ["weight_kg", "pain_score", "eq5d_mobility", "eq5d_self_care"],
            "label": ["Weight (kg)", "Pain score", "Mobility", "Self-care"],
            "form": ["Vital Signs", "Pain", "Quality of Life (EQ-5D)", "Quality of Life (EQ-5D)"],
        }
    )


@pytest.fixture
def keys():
    return ["individual_id", "group", "event_name"]
