from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd
from scipy import stats


@dataclass
class StatSummary:
    count: int
    n_missing: int
    mean: float | None
    median: float | None
    std: float | None
    min: float | None
    max: float | None
    skewness: float | None

    def to_dict(self) -> Dict[str, float | int | None]:
        return {
            "count": self.count,
            "n_missing": self.n_missing,
            "mean": self.mean,
            "median": self.median,
            "std": self.std,
            "min": self.min,
            "max": self.max,
            "skewness": self.skewness,
        }


def _optional(value: float) -> float | None:
    return None if pd.isna(value) else float(value)


def describe_series(series: pd.Series) -> StatSummary:
    numeric = pd.to_numeric(series, errors="coerce")
    clean = numeric.dropna()
    n_missing = int(numeric.isna().sum())
    if clean.empty:
        return StatSummary(0, n_missing, None, None, None, None, None, None)
    return StatSummary(
        count=int(clean.count()),
        n_missing=n_missing,
        mean=float(clean.mean()),
        median=float(clean.median()),
        std=_optional(clean.std()),
        min=float(clean.min()),
        max=float(clean.max()),
        skewness=_optional(stats.skew(clean.to_numpy())) if len(clean) >= 3 else None,
    )


def _group_items(long_df: pd.DataFrame, by: Sequence[str]):
    keys = ["variable", *by]
    # observed=True keeps empty category combinations out of the summary
    for group_vals, group_df in long_df.groupby(keys, observed=True, dropna=False, sort=False):
        if not isinstance(group_vals, tuple):
            group_vals = (group_vals,)
        yield dict(zip(keys, group_vals)), group_df


def _clean_keys(keys: Dict) -> Dict:
    return {k: (None if pd.isna(v) else (v.item() if isinstance(v, np.generic) else v)) for k, v in keys.items()}


def summarize_numeric(long_df: pd.DataFrame, by: Sequence[str] = ()) -> List[Dict]:
    """Descriptive statistics of ``value`` per variable and ``by`` columns."""
    rows: List[Dict] = []
    if long_df is None or long_df.empty:
        return rows
    for keys, group_df in _group_items(long_df, by):
        row = _clean_keys(keys)
        label = group_df["label"].dropna()
        row["label"] = str(label.iloc[0]) if not label.empty else None
        row.update(describe_series(group_df["value"]).to_dict())
        rows.append(row)
    return rows


def summarize_factor(long_df: pd.DataFrame, by: Sequence[str] = ()) -> List[Dict]:
    """Counts and proportions of each response level per variable and ``by`` columns."""
    rows: List[Dict] = []
    if long_df is None or long_df.empty:
        return rows
    for keys, group_df in _group_items(long_df, by):
        counts = group_df["value"].value_counts(dropna=False, sort=False)
        total = int(counts.sum())
        levels = {}
        for level, count in counts.items():
            name = "NA" if pd.isna(level) else str(level)
            levels[name] = {
                "n": int(count),
                "proportion": float(count) / total if total else None,
            }
        row = _clean_keys(keys)
        row["total"] = total
        row["levels"] = levels
        rows.append(row)
    return rows
