from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import plotly.graph_objects as go
import plotly.io as pio
import seaborn as sns
from matplotlib.figure import Figure

from .io import ensure_dir

logger = logging.getLogger(__name__)

DEFAULT_FONT = "DejaVu Sans"


def setup_style(style: str = "whitegrid", dpi: int = 120, font: str = DEFAULT_FONT) -> None:
    sns.set_style(style)
    plt.rcParams["font.sans-serif"] = [font]
    plt.rcParams["axes.unicode_minus"] = False
    plt.rcParams["figure.dpi"] = dpi


def save_figure(fig: Figure | go.Figure, path: str | Path) -> Path:
    """Write ``fig`` to ``path`` plus the suffix its backend supports.

    Matplotlib figures become PNG files, plotly figures standalone HTML pages
    loading plotly.js from the CDN. Returns the path actually written.
    """
    base = Path(path)
    ensure_dir(base.parent)
    if isinstance(fig, go.Figure):
        out_path = base.with_name(base.name + ".html")
        pio.write_html(fig, file=str(out_path), include_plotlyjs="cdn", full_html=True)
    elif isinstance(fig, Figure):
        out_path = base.with_name(base.name + ".png")
        fig.savefig(out_path, bbox_inches="tight")
    else:
        raise TypeError(f"Cannot save object of type {type(fig).__name__}")
    logger.info("Writing figure %s", out_path.name)
    return out_path
