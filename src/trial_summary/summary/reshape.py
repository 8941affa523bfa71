"""Wide-to-long reshaping and lookup annotation."""
from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

LOOKUP_COLUMNS = ["identifier", "label", "form"]
LONG_COLUMNS = ["variable", "value", "label", "form"]


def form_key(form: str) -> str:
    """Slug used in result names, e.g. ``'Quality of Life (EQ-5D)'`` -> ``'quality_of_life_eq_5d'``."""
    out = str(form).replace(" ", "_")
    out = re.sub(r"[()]", "", out)
    return out.replace("-", "_").lower()


def prepare_lookup(lookup: Optional[pd.DataFrame]) -> pd.DataFrame:
    if lookup is None:
        return pd.DataFrame({col: pd.Series(dtype=object) for col in LOOKUP_COLUMNS})
    missing = [col for col in LOOKUP_COLUMNS if col not in lookup.columns]
    if missing:
        raise ValueError(f"Lookup table is missing columns: {missing}")
    table = lookup[LOOKUP_COLUMNS].copy()
    table["identifier"] = table["identifier"].astype(str)
    # one label per identifier so the join never adds rows
    return table.drop_duplicates(subset="identifier", keep="first")


def subset_unique(df: pd.DataFrame, keys: Sequence[str], variables: Sequence[str]) -> pd.DataFrame:
    clash = [key for key in keys if key in LONG_COLUMNS]
    if clash:
        raise ValueError(f"Key columns clash with reserved long-format names: {clash}")
    return df[[*keys, *variables]].drop_duplicates().reset_index(drop=True)


def to_long(
    df: pd.DataFrame,
    keys: Sequence[str],
    variables: Sequence[str],
    lookup: Optional[pd.DataFrame],
) -> pd.DataFrame:
    """Melt ``variables`` into (variable, value) rows and attach label/form.

    ``df`` is expected to be de-duplicated already. Variables absent from the
    lookup keep a missing label and form.
    """
    keys = list(keys)
    variables = list(variables)
    long_df = df[keys + variables].melt(
        id_vars=keys,
        value_vars=variables,
        var_name="variable",
        value_name="value",
    )
    long_df["variable"] = long_df["variable"].astype(str)
    table = prepare_lookup(lookup).rename(columns={"identifier": "variable"})
    long_df = long_df.merge(table, how="left", on="variable")
    long_df["variable"] = pd.Categorical(long_df["variable"], categories=[str(v) for v in variables], ordered=True)
    return long_df[[*keys, *LONG_COLUMNS]]


def numeric_long(
    df: pd.DataFrame,
    keys: Sequence[str],
    variables: Sequence[str],
    lookup: Optional[pd.DataFrame],
) -> pd.DataFrame:
    long_df = to_long(df, keys, variables, lookup)
    long_df["value"] = pd.to_numeric(long_df["value"], errors="coerce")
    logger.info("Reshaped %d numeric variables into %d rows", len(variables), len(long_df))
    return long_df


def collate_levels(df: pd.DataFrame, variables: Sequence[str]) -> List:
    """Response levels across ``variables`` in order of first appearance."""
    levels: List = []
    for col in variables:
        series = df[col]
        if isinstance(series.dtype, pd.CategoricalDtype):
            candidates = list(series.cat.categories)
        else:
            candidates = list(pd.unique(series.dropna()))
        levels.extend(level for level in candidates if level not in levels)
    return levels


def factor_long(
    df: pd.DataFrame,
    keys: Sequence[str],
    variables: Sequence[str],
    lookup: Optional[pd.DataFrame],
    levels: Optional[Sequence] = None,
    remove_na: bool = True,
) -> pd.DataFrame:
    long_df = to_long(df, keys, variables, lookup)
    categories = list(levels) if levels else collate_levels(df, variables)
    # melt of categoricals with differing categories leaves object values
    long_df["value"] = pd.Categorical(long_df["value"].astype(object), categories=categories)
    if remove_na:
        long_df = long_df.loc[long_df["value"].notna()].reset_index(drop=True)
    logger.info("Reshaped %d categorical variables into %d rows", len(variables), len(long_df))
    return long_df
