"""Utility helpers"""

from .io import ensure_dir, load_dataframe, resolve_output, save_json
from .stats import (
    StatSummary,
    describe_series,
    summarize_factor,
    summarize_numeric,
)
from . import plotting

__all__ = [
    "ensure_dir",
    "load_dataframe",
    "resolve_output",
    "save_json",
    "StatSummary",
    "describe_series",
    "summarize_factor",
    "summarize_numeric",
    "plotting",
]
