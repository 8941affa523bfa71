from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from jinja2 import Template

from ..config import apply_column_types, infer_base_dir, load_config, output_paths, plot_arguments, resolve_path
from ..summary import PlotSummary, plot_summary, reshape_summary
from ..utils import plotting
from ..utils.io import ensure_dir, load_dataframe, resolve_output, save_json
from ..utils.stats import summarize_factor, summarize_numeric

logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).parent / "templates" / "summary_report.html"

RESHAPE_ARGS = ("id", "select", "levels_factor", "group", "events", "remove_na")


def render_report(context: Dict[str, Any], report_path: Path) -> None:
    template_text = TEMPLATE_PATH.read_text(encoding="utf-8")
    template = Template(template_text)
    html = template.render(**context)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(html, encoding="utf-8")
    logger.info("Wrote report %s", report_path)


def _load_inputs(config: Dict[str, Any], base_dir: Path):
    df = load_dataframe(resolve_path(config["input_path"], base_dir))
    df = apply_column_types(df, config)
    lookup: Optional[pd.DataFrame] = None
    if config.get("lookup_path"):
        lookup = load_dataframe(resolve_path(config["lookup_path"], base_dir))
    return df, lookup


def summary_statistics(summary: PlotSummary, by: List[str]) -> Dict[str, Any]:
    return {
        "numeric_variables": summary.numeric_vars,
        "factor_variables": summary.factor_vars,
        "numeric": summarize_numeric(summary.numeric, by),
        "factor": summarize_factor(summary.factor, by),
    }


def run_describe(config_path: str | Path) -> Dict[str, Any]:
    """Compute descriptive statistics only; no charts are drawn."""
    config_path = Path(config_path).resolve()
    base_dir = infer_base_dir(config_path)
    config = load_config(config_path)
    df, lookup = _load_inputs(config, base_dir)
    outputs = output_paths(config, base_dir)

    kwargs = plot_arguments(config)
    summary = reshape_summary(
        df,
        lookup_fields=lookup,
        **{key: kwargs[key] for key in RESHAPE_ARGS if key in kwargs},
    )
    by = [col for col in (kwargs["group"], kwargs["events"]) if col]
    stats_json_path = resolve_output(outputs["stats_json"])
    save_json(summary_statistics(summary, by), stats_json_path)
    return {"stats_json": str(stats_json_path)}


def run_summary(config_path: str | Path) -> Dict[str, Any]:
    config_path = Path(config_path).resolve()
    base_dir = infer_base_dir(config_path)
    config = load_config(config_path)
    df, lookup = _load_inputs(config, base_dir)
    outputs = output_paths(config, base_dir)

    kwargs = plot_arguments(config)
    plotting.setup_style(kwargs.get("style") or "whitegrid")
    summary = plot_summary(df, lookup_fields=lookup, **kwargs)

    by = [col for col in (kwargs["group"], kwargs["events"]) if col]
    stats_bundle = summary_statistics(summary, by)
    stats_json_path = resolve_output(outputs["stats_json"])
    save_json(stats_bundle, stats_json_path)

    figures_dir = ensure_dir(outputs["figures_dir"])
    report_path = resolve_output(outputs["report"])
    figures: Dict[str, str] = {}
    for name, chart in summary.items():
        written = plotting.save_figure(chart, figures_dir / name)
        figures[name] = str(written)

    manifest_path = resolve_output(outputs["manifest"])
    save_json(
        {
            "config": str(config_path),
            "generated_at": datetime.now().isoformat(timespec="seconds"),
            "figures": figures,
            "stats_json": str(stats_json_path),
        },
        manifest_path,
    )

    context = {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "numeric_stats": stats_bundle["numeric"],
        "factor_stats": stats_bundle["factor"],
        "by": by,
        "figures": [
            {
                "name": name,
                "path": Path(os.path.relpath(path, report_path.parent)).as_posix(),
                "interactive": path.endswith(".html"),
            }
            for name, path in figures.items()
        ],
    }
    render_report(context, report_path)

    return {
        "report": str(report_path),
        "stats_json": str(stats_json_path),
        "manifest": str(manifest_path),
        "figures": list(figures.values()),
    }
