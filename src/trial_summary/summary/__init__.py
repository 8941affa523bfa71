from .classify import classify_variables, resolve_columns
from .reshape import factor_long, form_key, numeric_long, prepare_lookup, subset_unique, to_long
from .plot_summary import PlotSummary, plot_summary, reshape_summary

__all__ = [
    "classify_variables",
    "resolve_columns",
    "factor_long",
    "form_key",
    "numeric_long",
    "prepare_lookup",
    "subset_unique",
    "to_long",
    "PlotSummary",
    "plot_summary",
    "reshape_summary",
]
