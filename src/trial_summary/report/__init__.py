from .run_summary import render_report, run_describe, run_summary, summary_statistics

__all__ = ["render_report", "run_describe", "run_summary", "summary_statistics"]
