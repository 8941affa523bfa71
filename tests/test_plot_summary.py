from __future__ import annotations

import logging

import pandas as pd
import pytest
from matplotlib.colors import to_hex
from matplotlib.figure import Figure

from trial_summary import PlotSummary, plot_summary

NUMERIC = ["weight_kg", "pain_score"]
FACTOR = ["eq5d_mobility", "eq5d_self_care"]


def _has_legend(fig: Figure) -> bool:
    return bool(fig.legends) or any(ax.get_legend() is not None for ax in fig.axes)


def _summary(visits, lookup, **kwargs) -> PlotSummary:
    kwargs.setdefault("select", NUMERIC + FACTOR)
    return plot_summary(visits, lookup_fields=lookup, events="event_name", **kwargs)


def test_default_chart_names(visits, lookup) -> None:
    result = _summary(visits, lookup)

    assert list(result) == [
        "histogram",
        "histogram_group",
        "boxplot",
        "boxplot_group",
        "factor_quality_of_life_eq_5d",
        "factor",
    ]
    assert all(isinstance(fig, Figure) for fig in result.values())


def test_long_frames_are_exposed(visits, lookup) -> None:
    result = _summary(visits, lookup)

    assert result.numeric_vars == NUMERIC
    assert result.factor_vars == FACTOR
    assert len(result.numeric) == 8 * len(NUMERIC)
    assert set(result.factor["form"]) == {"Quality of Life (EQ-5D)"}


def test_no_numeric_variables_means_no_continuous_charts(visits, lookup) -> None:
    result = _summary(visits, lookup, select=FACTOR)

    assert not [name for name in result if name.startswith(("histogram", "boxplot"))]
    assert result.numeric is None
    assert "factor" in result


def test_no_categorical_variables_means_no_factor_charts(visits, lookup) -> None:
    result = _summary(visits, lookup, select=NUMERIC)

    assert not [name for name in result if name.startswith("factor")]
    assert result.factor is None
    assert "histogram" in result


def test_individual_adds_one_chart_per_variable_and_kind(visits, lookup) -> None:
    base = _summary(visits, lookup)
    detailed = _summary(visits, lookup, individual=True)

    added = set(detailed) - set(base)
    assert added == {
        "histogram_weight_kg",
        "histogram_pain_score",
        "boxplot_weight_kg",
        "boxplot_pain_score",
        "factor_eq5d_mobility",
        "factor_eq5d_self_care",
    }
    assert len(detailed) == len(base) + 2 * len(NUMERIC) + len(FACTOR)


def test_individual_histogram_only(visits, lookup) -> None:
    result = _summary(visits, lookup, select=NUMERIC, boxplot=False, individual=True)

    assert list(result) == ["histogram", "histogram_group", "histogram_weight_kg", "histogram_pain_score"]


def test_legends_removed_by_default(visits, lookup) -> None:
    result = _summary(visits, lookup, individual=True)

    assert not any(_has_legend(fig) for fig in result.values())


def test_legends_kept_when_requested(visits, lookup) -> None:
    result = _summary(visits, lookup, legend_continuous=True, legend_factor=True)

    assert _has_legend(result["histogram"])
    assert _has_legend(result["factor"])
    assert _has_legend(result["factor_quality_of_life_eq_5d"])


def test_factor_legend_independent_of_continuous(visits, lookup) -> None:
    result = _summary(visits, lookup, legend_factor=True)

    assert not _has_legend(result["histogram"])
    assert not _has_legend(result["boxplot"])
    assert _has_legend(result["factor"])


def test_without_group_or_events(visits, lookup) -> None:
    result = plot_summary(visits, select=NUMERIC + FACTOR, lookup_fields=lookup, group=None)

    assert "histogram_group" not in result
    assert "boxplot_group" not in result
    assert {"histogram", "boxplot", "factor", "factor_quality_of_life_eq_5d"} <= set(result)


def test_variables_missing_from_lookup_skip_form_charts(visits, lookup) -> None:
    partial = lookup.loc[~lookup["identifier"].isin(FACTOR)]

    result = _summary(visits, partial)

    assert "factor" in result
    assert "factor_quality_of_life_eq_5d" not in result
    assert result.factor["label"].isna().all()


def test_histogram_and_boxplot_can_be_switched_off(visits, lookup) -> None:
    result = _summary(visits, lookup, histogram=False, boxplot=False)

    assert result.numeric is not None
    assert list(result) == ["factor_quality_of_life_eq_5d", "factor"]


def test_all_missing_factor_responses_skip_factor_charts(visits, lookup) -> None:
    df = visits.assign(eq5d_self_care=pd.Series([None] * len(visits), dtype=object))

    result = _summary(df, lookup, select=["eq5d_self_care"])

    assert result.factor is not None and result.factor.empty
    assert len(result) == 0


@pytest.mark.parametrize("position", ["identity", "dodge", "stack", "fill"])
def test_histogram_positions(visits, lookup, position) -> None:
    result = _summary(visits, lookup, select=NUMERIC, boxplot=False, position=position)

    assert isinstance(result["histogram"], Figure)


def test_invalid_position_raises(visits, lookup) -> None:
    with pytest.raises(ValueError, match="position"):
        _summary(visits, lookup, position="jitter")


def test_missing_key_column_raises(visits, lookup) -> None:
    with pytest.raises(ValueError, match="arm"):
        plot_summary(visits, select=NUMERIC, lookup_fields=lookup, group="arm")


def test_rows_with_missing_group_are_not_plotted(visits, lookup) -> None:
    df = visits.copy()
    df.loc[df["individual_id"] == 4, "group"] = None

    result = _summary(df, lookup, select=["pain_score"], boxplot=False)

    # the long frame keeps every row, only the charts drop the missing group
    assert len(result.numeric) == 8
    grid = result["histogram_group"]
    titles = {ax.get_title() for ax in grid.axes}
    assert titles == {"Pain score | Drug", "Pain score | Placebo"}


def _colors_by_level(ax) -> dict:
    return {container.get_label(): to_hex(container.patches[0].get_facecolor()) for container in ax.containers}


def test_variables_sharing_a_label_keep_separate_panels() -> None:
    df = pd.DataFrame(
        {
            "individual_id": [1, 2, 3],
            "group": ["A", "A", "B"],
            "bp_total": [120.0, 135.0, 128.0],
            "pain_total": [4.0, 6.0, 5.0],
        }
    )
    lookup = pd.DataFrame(
        {
            "identifier": ["bp_total", "pain_total"],
            "label": ["Total score", "Total score"],
            "form": ["Vital Signs", "Pain"],
        }
    )

    result = plot_summary(df, lookup_fields=lookup, boxplot=False)

    titles = [ax.get_title() for ax in result["histogram"].axes if ax.axison]
    assert titles == ["Total score (bp_total)", "Total score (pain_total)"]
    assert result.numeric["label"].eq("Total score").all()


def test_response_level_colour_is_the_same_in_every_panel() -> None:
    df = pd.DataFrame(
        {
            "individual_id": [1, 2, 3, 4],
            "group": ["A", "A", "B", "B"],
            "q1": ["No", "Some", "Severe", "No"],
            "q2": ["No", "Severe", "No", "Severe"],
        }
    )
    lookup = pd.DataFrame(
        {"identifier": ["q1", "q2"], "label": ["Question 1", "Question 2"], "form": ["F", "F"]}
    )

    result = plot_summary(df, lookup_fields=lookup)

    first, second = (ax for ax in result["factor_f"].axes)
    assert _colors_by_level(first)["Severe"] == _colors_by_level(second)["Severe"]
    assert _colors_by_level(first)["No"] == _colors_by_level(second)["No"]


def test_missing_responses_drawn_as_na_level(visits, lookup) -> None:
    result = _summary(visits, lookup, select=FACTOR, remove_na=False)

    fig = result["factor_quality_of_life_eq_5d"]
    levels = {container.get_label() for ax in fig.axes for container in ax.containers}
    assert "NA" in levels
    # the long frame keeps the response missing; only the chart names it
    assert result.factor["value"].isna().sum() == 1


def test_individual_chart_replacing_form_chart_is_logged(caplog) -> None:
    df = pd.DataFrame(
        {
            "individual_id": [1, 2],
            "group": ["A", "B"],
            "pain": ["Mild", "Severe"],
        }
    )
    lookup = pd.DataFrame({"identifier": ["pain"], "label": ["Pain"], "form": ["Pain"]})

    with caplog.at_level(logging.WARNING, logger="trial_summary.summary.plot_summary"):
        result = plot_summary(df, lookup_fields=lookup, individual=True)

    assert "factor_pain" in result
    assert "replaces the form chart" in caplog.text
