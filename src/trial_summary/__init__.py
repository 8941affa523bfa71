"""Summary charts for repeated-measures clinical trial data."""

__version__ = "0.1.0"

from .summary import PlotSummary, plot_summary, reshape_summary

__all__ = ["PlotSummary", "plot_summary", "reshape_summary", "__version__"]
