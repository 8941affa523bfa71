"""Matplotlib / seaborn chart builders returning detached ``Figure`` objects."""
from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .common import PANEL, level_colors, ordered_levels, proportions, wrap_shape

MULTIPLE = {"identity": "layer", "dodge": "dodge", "stack": "stack", "fill": "fill"}


def _subplots(n_rows: int, n_cols: int, width: float = 4.5, height: float = 3.2):
    return plt.subplots(
        n_rows,
        n_cols,
        figsize=(width * n_cols, height * n_rows),
        squeeze=False,
    )


def _no_data(ax: Axes) -> None:
    ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)
    ax.set_xticks([])
    ax.set_yticks([])


def _finish(fig: Figure, title: Optional[str], legend: bool) -> Figure:
    if title:
        fig.suptitle(title)
    if not legend:
        for ax in fig.axes:
            if ax.get_legend() is not None:
                ax.get_legend().remove()
        fig.legends.clear()
    fig.tight_layout()
    # detach from pyplot so the caller owns the figure
    plt.close(fig)
    return fig


def _hist_ax(ax: Axes, subset: pd.DataFrame, events: Optional[str], position: str) -> None:
    values = subset.dropna(subset=["value"])
    if values.empty:
        _no_data(ax)
        return
    sns.histplot(
        data=values,
        x="value",
        hue=events,
        multiple=MULTIPLE[position],
        alpha=0.5,
        ax=ax,
    )


def _box_ax(ax: Axes, subset: pd.DataFrame, events: Optional[str]) -> None:
    values = subset.dropna(subset=["value"])
    if values.empty:
        _no_data(ax)
        return
    if events is None:
        sns.boxplot(data=values, y="value", ax=ax)
    else:
        sns.boxplot(data=values, x=events, y="value", hue=events, ax=ax)
        ax.tick_params(axis="x", labelrotation=90)


def _bar_ax(ax: Axes, subset: pd.DataFrame, index: str) -> None:
    props = proportions(subset, index)
    if props.empty:
        _no_data(ax)
        return
    colors = level_colors(subset["value"])
    props.plot.barh(stacked=True, ax=ax, width=0.8, legend=True, color=[colors[level] for level in props.columns])
    ax.invert_xaxis()
    ax.set_xlabel("Proportion")
    ax.set_ylabel("")
    ax.legend(title="", fontsize="small")


def _panel_grid(data: pd.DataFrame, group: str, draw) -> Figure:
    panels = ordered_levels(data[PANEL])
    groups = ordered_levels(data[group])
    fig, axes = _subplots(max(1, len(panels)), max(1, len(groups)))
    for i, panel in enumerate(panels):
        for j, level in enumerate(groups):
            ax = axes[i][j]
            draw(ax, data.loc[(data[PANEL] == panel) & (data[group] == level)])
            ax.set_title(f"{panel} | {level}", fontsize="small")
    return fig


def _panel_wrap(data: pd.DataFrame, draw) -> Figure:
    panels = ordered_levels(data[PANEL])
    n_rows, n_cols = wrap_shape(len(panels))
    fig, axes = _subplots(n_rows, n_cols)
    flat = axes.ravel()
    for ax, panel in zip(flat, panels):
        draw(ax, data.loc[data[PANEL] == panel])
        ax.set_title(str(panel), fontsize="small")
    for ax in flat[len(panels):]:
        ax.set_axis_off()
    return fig


def histogram(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    title: Optional[str],
    position: str,
    legend: bool,
    xlabel: str = "",
) -> Figure:
    fig = _panel_wrap(data, lambda ax, subset: _hist_ax(ax, subset, events, position))
    for ax in fig.axes:
        ax.set_xlabel(xlabel)
        ax.set_ylabel("N")
    return _finish(fig, title, legend)


def histogram_grid(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    group: str,
    title: Optional[str],
    position: str,
    legend: bool,
) -> Figure:
    fig = _panel_grid(data, group, lambda ax, subset: _hist_ax(ax, subset, events, position))
    for ax in fig.axes:
        ax.set_xlabel("")
        ax.set_ylabel("N")
    return _finish(fig, title, legend)


def boxplot(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    title: Optional[str],
    legend: bool,
    xlabel: str = "",
    ylabel: str = "Score",
) -> Figure:
    fig = _panel_wrap(data, lambda ax, subset: _box_ax(ax, subset, events))
    for ax in fig.axes:
        ax.set_xlabel(xlabel)
        ax.set_ylabel(ylabel)
    return _finish(fig, title, legend)


def boxplot_grid(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    group: str,
    title: Optional[str],
    legend: bool,
) -> Figure:
    fig = _panel_grid(data, group, lambda ax, subset: _box_ax(ax, subset, events))
    for ax in fig.axes:
        ax.set_xlabel("")
        ax.set_ylabel("Score")
    return _finish(fig, title, legend)


def factor_form(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    title: Optional[str],
    legend: bool,
) -> Figure:
    """One stacked proportion bar per event, one row of panels per variable."""
    panels = ordered_levels(data[PANEL])
    fig, axes = _subplots(max(1, len(panels)), 1, width=7, height=2.4)
    index = events or PANEL
    for ax, panel in zip(axes[:, 0], panels):
        _bar_ax(ax, data.loc[data[PANEL] == panel], index)
        ax.set_title(str(panel), fontsize="small")
    return _finish(fig, title, legend)


def factor_overview(
    data: pd.DataFrame,
    *,
    group: Optional[str],
    title: Optional[str],
    legend: bool,
) -> Figure:
    """Forms down the rows, groups across the columns, one bar per variable."""
    forms = ordered_levels(data["form"])
    groups = ordered_levels(data[group]) if group else [None]
    fig, axes = _subplots(max(1, len(forms)), max(1, len(groups)), width=6, height=3)
    for i, form in enumerate(forms):
        for j, level in enumerate(groups):
            ax = axes[i][j]
            mask = data["form"] == form
            if level is not None:
                mask &= data[group] == level
            _bar_ax(ax, data.loc[mask], PANEL)
            ax.set_title(str(form) if level is None else f"{form} | {level}", fontsize="small")
    return _finish(fig, title, legend)


def factor_single(
    data: pd.DataFrame,
    *,
    events: Optional[str],
    title: Optional[str],
    legend: bool,
    ylabel: str = "",
) -> Figure:
    fig, axes = _subplots(1, 1, width=7, height=3)
    ax = axes[0][0]
    _bar_ax(ax, data, events or PANEL)
    ax.set_ylabel(ylabel)
    return _finish(fig, title, legend)
