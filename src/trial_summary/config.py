from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pandas as pd
import yaml

OPTION_KEYS = {
    "histogram",
    "boxplot",
    "individual",
    "interactive",
    "position",
    "remove_na",
    "style",
    "title_continuous",
    "title_factor",
    "legend_continuous",
    "legend_factor",
}

DEFAULT_OUTPUTS = {
    "figures_dir": "figures/summary",
    "report": "reports/summary_report.html",
    "stats_json": "results/summary_statistics.json",
    "manifest": "results/summary_manifest.json",
}


def load_config(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def resolve_path(path_like: str, base_dir: Path) -> Path:
    candidate = Path(path_like)
    if candidate.is_absolute():
        return candidate
    return (base_dir / candidate).resolve()


def infer_base_dir(config_path: Path) -> Path:
    parent = config_path.parent
    if (parent / "data").exists():
        return parent
    if parent.name == "config" and parent.parent.exists():
        return parent.parent
    return parent


def output_paths(config: Dict[str, Any], base_dir: Path) -> Dict[str, Path]:
    outputs = {**DEFAULT_OUTPUTS, **(config.get("outputs") or {})}
    return {name: resolve_path(value, base_dir) for name, value in outputs.items()}


def plot_arguments(config: Dict[str, Any]) -> Dict[str, Any]:
    """Keyword arguments for ``plot_summary`` taken from a loaded config."""
    options = config.get("options") or {}
    unknown = sorted(set(options) - OPTION_KEYS)
    if unknown:
        raise ValueError(f"Unknown options in config: {unknown}")
    columns = config.get("columns") or {}
    return {
        "id": columns.get("id", "individual_id"),
        "group": columns.get("group", "group"),
        "events": columns.get("events"),
        "select": config.get("select"),
        "levels_factor": config.get("levels_factor"),
        **options,
    }


def apply_column_types(df: pd.DataFrame, config: Dict[str, Any]) -> pd.DataFrame:
    """Cast configured factor columns and event order onto a freshly loaded table."""
    df = df.copy()
    for col in config.get("factor_columns") or []:
        if col not in df.columns:
            raise ValueError(f"Factor column not found in data frame: {col}")
        df[col] = df[col].astype("category")
    events = (config.get("columns") or {}).get("events")
    levels = config.get("event_levels")
    if events and levels:
        df[events] = pd.Categorical(df[events], categories=levels, ordered=True)
    return df
