"""Summary charts of repeated-measures study data.

``plot_summary`` takes a wide observation table (one row per individual and
event), works out which of the selected variables are continuous and which
are categorical, reshapes each class into long form annotated from a lookup
table and builds a fixed set of charts:

- continuous: ``histogram``, ``histogram_group``, ``boxplot``,
  ``boxplot_group`` and, when ``individual`` is set, ``histogram_<var>`` /
  ``boxplot_<var>``;
- categorical: ``factor_<form>`` for every form in the lookup, ``factor``
  and, when ``individual`` is set, ``factor_<var>``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

import pandas as pd
import seaborn as sns

from ..charts import check_position, interactive as interactive_charts, static as static_charts
from ..charts.common import NO_FORM, add_panels, drop_missing_group, ordered_levels, show_missing_levels
from .classify import ColumnSelection, classify_variables, resolve_columns
from .reshape import factor_long, form_key, numeric_long, subset_unique

logger = logging.getLogger(__name__)

TITLE_CONTINUOUS = "Continuous outcomes by treatment group."
TITLE_FACTOR = "Factor outcomes by treatment group"


@dataclass(eq=False)
class PlotSummary(Mapping):
    """Charts keyed by name, plus the long frames they were drawn from."""

    charts: Dict[str, Any] = field(default_factory=dict)
    numeric: Optional[pd.DataFrame] = None
    factor: Optional[pd.DataFrame] = None
    numeric_vars: List[str] = field(default_factory=list)
    factor_vars: List[str] = field(default_factory=list)

    def __getitem__(self, key: str) -> Any:
        return self.charts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.charts)

    def __len__(self) -> int:
        return len(self.charts)


def _label_of(long_df: pd.DataFrame, variable: str) -> str:
    labels = long_df.loc[long_df["variable"] == variable, "label"].dropna()
    return str(labels.iloc[0]) if not labels.empty else variable


def _continuous_charts(
    result: PlotSummary,
    backend,
    *,
    events: Optional[str],
    group: Optional[str],
    position: str,
    histogram: bool,
    boxplot: bool,
    individual: bool,
    title: str,
    legend: bool,
) -> None:
    data = drop_missing_group(add_panels(result.numeric), group)

    if histogram:
        result.charts["histogram"] = backend.histogram(
            data, events=events, title=title, position=position, legend=legend
        )
        if group is not None:
            result.charts["histogram_group"] = backend.histogram_grid(
                data, events=events, group=group, title=title, position=position, legend=legend
            )
        if individual:
            for var in result.numeric_vars:
                label = _label_of(data, var)
                result.charts[f"histogram_{var}"] = backend.histogram(
                    data.loc[data["variable"] == var],
                    events=events,
                    title=label,
                    position=position,
                    legend=legend,
                    xlabel=label,
                )

    if boxplot:
        result.charts["boxplot"] = backend.boxplot(data, events=events, title=title, legend=legend)
        if group is not None:
            result.charts["boxplot_group"] = backend.boxplot_grid(
                data, events=events, group=group, title=title, legend=legend
            )
        if individual:
            for var in result.numeric_vars:
                label = _label_of(data, var)
                result.charts[f"boxplot_{var}"] = backend.boxplot(
                    data.loc[data["variable"] == var],
                    events=events,
                    title=label,
                    legend=legend,
                    xlabel="Event",
                    ylabel=label,
                )


def _factor_charts(
    result: PlotSummary,
    backend,
    *,
    events: Optional[str],
    group: Optional[str],
    individual: bool,
    title: str,
    legend: bool,
) -> None:
    data = show_missing_levels(add_panels(result.factor))

    # per-form charts only cover variables the lookup assigns to a form
    for form in ordered_levels(data["form"]):
        if form == NO_FORM:
            continue
        subset = drop_missing_group(data.loc[data["form"] == form], group)
        result.charts[f"factor_{form_key(form)}"] = backend.factor_form(
            subset, events=events, title=str(form), legend=legend
        )

    result.charts["factor"] = backend.factor_overview(data, group=group, title=title, legend=legend)

    if individual:
        grouped = drop_missing_group(data, group)
        for var in result.factor_vars:
            if f"factor_{var}" in result.charts:
                logger.warning("Chart factor_%s for variable %s replaces the form chart of the same name", var, var)
            result.charts[f"factor_{var}"] = backend.factor_single(
                grouped.loc[grouped["variable"] == var],
                events=events,
                title=None,
                legend=legend,
                ylabel=_label_of(data, var),
            )


def reshape_summary(
    df: pd.DataFrame,
    id: str = "individual_id",
    select: ColumnSelection = None,
    lookup_fields: Optional[pd.DataFrame] = None,
    levels_factor: Optional[Sequence] = None,
    group: Optional[str] = "group",
    events: Optional[str] = None,
    remove_na: bool = True,
) -> PlotSummary:
    """Classify and reshape the selected variables without drawing anything."""
    keys = list(dict.fromkeys(col for col in (id, group, events) if col is not None))
    missing = [col for col in keys if col not in df.columns]
    if missing:
        raise ValueError(f"Columns not found in data frame: {missing}")
    variables = [col for col in resolve_columns(df, select, exclude=keys) if col not in keys]

    wide = subset_unique(df, keys, variables)
    numeric_vars, factor_vars = classify_variables(wide, variables)
    result = PlotSummary(numeric_vars=numeric_vars, factor_vars=factor_vars)
    if numeric_vars:
        result.numeric = numeric_long(wide, keys, numeric_vars, lookup_fields)
    if factor_vars:
        result.factor = factor_long(
            wide, keys, factor_vars, lookup_fields, levels=levels_factor, remove_na=remove_na
        )
    return result


def plot_summary(
    df: pd.DataFrame,
    id: str = "individual_id",
    select: ColumnSelection = None,
    lookup_fields: Optional[pd.DataFrame] = None,
    levels_factor: Optional[Sequence] = None,
    group: Optional[str] = "group",
    events: Optional[str] = None,
    style: Optional[str] = "whitegrid",
    position: str = "identity",
    histogram: bool = True,
    boxplot: bool = True,
    individual: bool = False,
    interactive: bool = False,
    remove_na: bool = True,
    title_continuous: str = TITLE_CONTINUOUS,
    title_factor: str = TITLE_FACTOR,
    legend_continuous: bool = False,
    legend_factor: bool = False,
) -> PlotSummary:
    """
    Plot the distribution of continuous and categorical variables.

    :param df: Wide data frame, one row per individual (and event).
    :param id: Column identifying individuals.
    :param select: Variables to summarise; names, a single name, a callable
        ``df -> names`` or ``None`` for every non-key column.
    :param lookup_fields: Data frame with ``identifier``, ``label`` and ``form``
        describing each variable.
    :param levels_factor: Response levels (in order) applied to every
        categorical variable; values outside them become missing.
    :param group: Column to summarise by (e.g. treatment arm), or ``None``.
    :param events: Column defining repeated events, or ``None``.
    :param style: Seaborn axes style for static charts.
    :param position: Histogram bar position, ``identity``, ``dodge``,
        ``stack`` or ``fill``.
    :param histogram: Plot histograms of continuous variables.
    :param boxplot: Plot box-plots of continuous variables.
    :param individual: Also plot each variable on its own.
    :param interactive: Build plotly figures instead of matplotlib ones.
    :param remove_na: Drop missing responses of categorical variables.
    :param title_continuous: Title of faceted continuous charts.
    :param title_factor: Title of the faceted factor chart.
    :param legend_continuous: Show legends on histograms and box-plots.
    :param legend_factor: Show legends on stacked bar charts.
    :returns: PlotSummary mapping chart names to figures.
    """
    check_position(position)
    result = reshape_summary(
        df,
        id=id,
        select=select,
        lookup_fields=lookup_fields,
        levels_factor=levels_factor,
        group=group,
        events=events,
        remove_na=remove_na,
    )
    backend = interactive_charts if interactive else static_charts
    context = sns.axes_style(style) if style and not interactive else nullcontext()

    with context:
        if result.numeric is not None and (histogram or boxplot):
            _continuous_charts(
                result,
                backend,
                events=events,
                group=group,
                position=position,
                histogram=histogram,
                boxplot=boxplot,
                individual=individual,
                title=title_continuous,
                legend=legend_continuous,
            )
        else:
            logger.debug("No continuous charts requested or no numeric variables selected")

        if result.factor is not None and not result.factor.empty:
            _factor_charts(
                result,
                backend,
                events=events,
                group=group,
                individual=individual,
                title=title_factor,
                legend=legend_factor,
            )
        elif result.factor is not None:
            logger.warning("No non-missing responses for categorical variables; skipping factor charts")
        else:
            logger.debug("No categorical variables selected; skipping factor charts")

    logger.info("Built %d charts", len(result))
    return result
