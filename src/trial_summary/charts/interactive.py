"""Plotly express chart builders mirroring :mod:`trial_summary.charts.static`."""
from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .common import PANEL, level_colors, ordered_levels, wrap_shape

BARMODES = {
    "identity": ("overlay", None),
    "dodge": ("group", None),
    "stack": ("stack", None),
    "fill": ("stack", "fraction"),
}


def _plain(data: pd.DataFrame, columns: List[Optional[str]]) -> pd.DataFrame:
    """Copy with categorical columns turned into plain values plotly can group on."""
    data = data.copy()
    for col in columns:
        if col is not None and isinstance(data[col].dtype, pd.CategoricalDtype):
            data[col] = data[col].astype(object)
    return data


def _orders(data: pd.DataFrame, columns: List[Optional[str]]) -> Dict[str, list]:
    return {col: ordered_levels(data[col]) for col in columns if col is not None}


def _spacing(n: int, default: float = 0.05) -> float:
    if n <= 1:
        return default
    return min(default, 0.9 / (n - 1))


def _finish(fig: go.Figure, legend: bool, n_rows: int = 1) -> go.Figure:
    # facet titles read "panel=Label"; keep only the value
    fig.for_each_annotation(lambda a: a.update(text=a.text.split("=", 1)[-1]))
    fig.update_layout(showlegend=legend, height=max(400, 260 * n_rows))
    return fig


def histogram(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    title: Optional[str],
    position: str,
    legend: bool,
    xlabel: str = "",
) -> go.Figure:
    values = data.dropna(subset=["value"])
    n_rows, n_cols = wrap_shape(len(ordered_levels(values[PANEL])))
    barmode, barnorm = BARMODES[position]
    fig = px.histogram(
        _plain(values, [PANEL, events]),
        x="value",
        color=events,
        facet_col=PANEL,
        facet_col_wrap=n_cols,
        facet_row_spacing=_spacing(n_rows),
        barmode=barmode,
        barnorm=barnorm,
        opacity=0.5,
        title=title,
        category_orders=_orders(values, [PANEL, events]),
    )
    fig.update_xaxes(title_text=xlabel, matches=None)
    fig.update_yaxes(title_text="N", matches=None)
    return _finish(fig, legend, n_rows)


def histogram_grid(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    group: str,
    title: Optional[str],
    position: str,
    legend: bool,
) -> go.Figure:
    values = data.dropna(subset=["value"])
    n_rows = len(ordered_levels(values[PANEL]))
    barmode, barnorm = BARMODES[position]
    fig = px.histogram(
        _plain(values, [PANEL, group, events]),
        x="value",
        color=events,
        facet_row=PANEL,
        facet_col=group,
        facet_row_spacing=_spacing(n_rows),
        barmode=barmode,
        barnorm=barnorm,
        opacity=0.5,
        title=title,
        category_orders=_orders(values, [PANEL, group, events]),
    )
    fig.update_xaxes(title_text="", matches=None)
    fig.update_yaxes(matches=None)
    return _finish(fig, legend, n_rows)


def boxplot(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    title: Optional[str],
    legend: bool,
    xlabel: str = "",
    ylabel: str = "Score",
) -> go.Figure:
    values = data.dropna(subset=["value"])
    n_rows, n_cols = wrap_shape(len(ordered_levels(values[PANEL])))
    fig = px.box(
        _plain(values, [PANEL, events]),
        x=events,
        y="value",
        color=events,
        facet_col=PANEL,
        facet_col_wrap=n_cols,
        facet_row_spacing=_spacing(n_rows),
        title=title,
        category_orders=_orders(values, [PANEL, events]),
    )
    fig.update_xaxes(title_text=xlabel, tickangle=90)
    fig.update_yaxes(title_text=ylabel, matches=None)
    return _finish(fig, legend, n_rows)


def boxplot_grid(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    group: str,
    title: Optional[str],
    legend: bool,
) -> go.Figure:
    values = data.dropna(subset=["value"])
    n_rows = len(ordered_levels(values[PANEL]))
    fig = px.box(
        _plain(values, [PANEL, group, events]),
        x=events,
        y="value",
        color=events,
        facet_row=PANEL,
        facet_col=group,
        facet_row_spacing=_spacing(n_rows),
        title=title,
        category_orders=_orders(values, [PANEL, group, events]),
    )
    fig.update_xaxes(title_text="", tickangle=90)
    fig.update_yaxes(title_text="Score", matches=None)
    return _finish(fig, legend, n_rows)


def _proportion_bars(
    data: pd.DataFrame,
    index: str,
    title: Optional[str],
    facet_row: Optional[str] = None,
    facet_col: Optional[str] = None,
) -> go.Figure:
    values = data.dropna(subset=[index])
    columns = [index, "value", facet_row, facet_col]
    return px.histogram(
        _plain(values, columns),
        y=index,
        color="value",
        color_discrete_map=level_colors(values["value"]),
        orientation="h",
        barnorm="fraction",
        facet_row=facet_row,
        facet_col=facet_col,
        facet_row_spacing=_spacing(len(ordered_levels(values[facet_row])) if facet_row else 1),
        title=title,
        category_orders=_orders(values, columns),
    )


def factor_form(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    title: Optional[str],
    legend: bool,
) -> go.Figure:
    fig = _proportion_bars(data, events or PANEL, title, facet_row=PANEL)
    fig.update_xaxes(title_text="Proportion", autorange="reversed")
    fig.update_yaxes(title_text="", matches=None)
    return _finish(fig, legend, len(ordered_levels(data[PANEL])))


def factor_overview(
    data: pd.DataFrame,
    *,
    group: Optional[str],
    title: Optional[str],
    legend: bool,
) -> go.Figure:
    fig = _proportion_bars(data, PANEL, title, facet_row="form", facet_col=group)
    fig.update_xaxes(title_text="Proportion")
    fig.update_yaxes(title_text="", matches=None)
    return _finish(fig, legend, len(ordered_levels(data["form"])))


def factor_single(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    title: Optional[str],
    legend: bool,
    ylabel: str = "",
) -> go.Figure:
    fig = _proportion_bars(data, events or PANEL, title)
    fig.update_xaxes(title_text="Proportion", autorange="reversed")
    fig.update_yaxes(title_text=ylabel)
    return _finish(fig, legend)
