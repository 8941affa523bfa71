from __future__ import annotations

from math import ceil
from typing import Dict, List, Optional, Tuple

import pandas as pd
import seaborn as sns

PANEL = "panel"
NA_LEVEL = "NA"
NO_FORM = "(no form)"
POSITIONS = ("identity", "dodge", "stack", "fill")


def check_position(position: str) -> str:
    if position not in POSITIONS:
        raise ValueError(f"position must be one of {POSITIONS}, got {position!r}")
    return position


def wrap_shape(n_panels: int, ncol: int = 3) -> Tuple[int, int]:
    n_cols = max(1, min(n_panels, ncol))
    return max(1, ceil(n_panels / n_cols)), n_cols


def ordered_levels(series: pd.Series) -> List:
    if isinstance(series.dtype, pd.CategoricalDtype):
        present = set(series.dropna())
        return [level for level in series.cat.categories if level in present]
    return list(pd.unique(series.dropna()))


def add_panels(long_df: pd.DataFrame) -> pd.DataFrame:
    """Copy of ``long_df`` with a ``panel`` column holding one title per variable.

    The title is the label, else the variable name. Variables sharing a label
    get the variable name appended so each keeps its own panel.
    """
    data = long_df.copy()
    variable = data["variable"].astype(str)
    label = data["label"].astype(object)
    base = label.where(label.notna(), variable).astype(str)

    titles: Dict[str, str] = {}
    for var in ordered_levels(data["variable"]):
        rows = base.loc[variable == str(var)]
        titles[str(var)] = rows.iloc[0] if not rows.empty else str(var)
    shared = {title for title in titles.values() if list(titles.values()).count(title) > 1}
    for var, title in titles.items():
        if title in shared:
            titles[var] = f"{title} ({var})"

    data[PANEL] = pd.Categorical(variable.map(titles), categories=list(titles.values()), ordered=True)
    data["form"] = data["form"].astype(object).where(data["form"].notna(), NO_FORM)
    return data


def drop_missing_group(data: pd.DataFrame, group: Optional[str]) -> pd.DataFrame:
    if group is None:
        return data
    return data.loc[data[group].notna()]


def show_missing_levels(data: pd.DataFrame) -> pd.DataFrame:
    """Make missing factor responses an explicit ``NA`` level."""
    if not data["value"].isna().any():
        return data
    data = data.copy()
    values = data["value"]
    if not isinstance(values.dtype, pd.CategoricalDtype):
        values = values.astype("category")
    if NA_LEVEL not in values.cat.categories:
        values = values.cat.add_categories([NA_LEVEL])
    data["value"] = values.fillna(NA_LEVEL)
    return data


def proportions(data: pd.DataFrame, index: str) -> pd.DataFrame:
    """Share of each response level within each ``index`` row."""
    subset = data.dropna(subset=[index])
    if subset.empty:
        return pd.DataFrame()
    counts = subset.groupby([index, "value"], observed=False).size().unstack("value", fill_value=0)
    # every response level stays a column so colours line up across panels
    counts = counts.loc[counts.sum(axis=1) > 0]
    return counts.div(counts.sum(axis=1), axis=0)


def level_colors(values: pd.Series) -> Dict:
    """Fixed colour per response level, in category order."""
    levels = list(values.cat.categories) if isinstance(values.dtype, pd.CategoricalDtype) else ordered_levels(values)
    return dict(zip(levels, sns.color_palette(n_colors=max(1, len(levels))).as_hex()))
