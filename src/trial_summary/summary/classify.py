"""Split selected columns into continuous and categorical variables."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Sequence, Tuple, Union

import pandas as pd
from pandas.api import types as ptypes

logger = logging.getLogger(__name__)

ColumnSelection = Union[None, str, Sequence[str], Callable[[pd.DataFrame], Iterable[str]]]


def resolve_columns(df: pd.DataFrame, select: ColumnSelection, exclude: Sequence[str] = ()) -> List[str]:
    """Turn a column selection into an explicit list of column names.

    ``select`` may be ``None`` (every column not in ``exclude``), a single
    column name, a sequence of names, or a callable receiving ``df`` and
    returning names. Duplicates are dropped, order is kept.
    """
    if select is None:
        names = [col for col in df.columns if col not in exclude]
    elif isinstance(select, str):
        names = [select]
    elif callable(select):
        names = list(select(df))
    else:
        names = list(select)

    missing = [name for name in names if name not in df.columns]
    if missing:
        raise ValueError(f"Columns not found in data frame: {missing}")
    return list(dict.fromkeys(names))


def is_numeric_variable(series: pd.Series) -> bool:
    return ptypes.is_numeric_dtype(series) and not ptypes.is_bool_dtype(series)


def is_categorical_variable(series: pd.Series) -> bool:
    if isinstance(series.dtype, pd.CategoricalDtype):
        return True
    return ptypes.is_object_dtype(series) or ptypes.is_string_dtype(series)


def classify_variables(df: pd.DataFrame, select: Sequence[str]) -> Tuple[List[str], List[str]]:
    numeric: List[str] = []
    categorical: List[str] = []
    for col in select:
        series = df[col]
        if is_numeric_variable(series):
            numeric.append(col)
        elif is_categorical_variable(series):
            categorical.append(col)
        else:
            logger.debug("Column %s (%s) is neither numeric nor categorical; skipped", col, series.dtype)
    logger.info("Classified %d numeric and %d categorical variables", len(numeric), len(categorical))
    return numeric, categorical
