"""
Grouped aggregations over the transaction analysis view.

Every helper returns a new DataFrame with the group columns first and the
measure column last, in group order. Passing `groups` reindexes the result
over a fixed label set so empty groups still get a row: 0 for sums and
counts, None for means.

Rounding follows pandas (half to even) unless `half_up=True`, which rounds
halves away from zero as SQL ROUND does on exact decimal averages.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

import pandas as pd


def _keys(by) -> list[str]:
    return [by] if isinstance(by, str) else list(by)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round halves away from zero.

    Example:
        round_half_up(40.5) -> 41.0, round_half_up(-2.5) -> -3.0
    """
    exponent = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP))


def _finish(
    series: pd.Series,
    by,
    name: str,
    groups: Optional[Iterable] = None,
    fill_value=None,
    ndigits: Optional[int] = None,
    half_up: bool = False,
) -> pd.DataFrame:
    keys = _keys(by)
    if groups is not None:
        if len(keys) != 1:
            raise ValueError("groups can only be used with a single group column")
        series = series.reindex(pd.Index(list(groups), name=keys[0]), fill_value=fill_value)
    if ndigits is not None and half_up:
        series = series.map(lambda value: value if pd.isna(value) else round_half_up(value, ndigits))
    elif ndigits is not None:
        series = series.round(ndigits)

    result = series.rename(name).reset_index()
    if fill_value is None and result[name].isna().any():
        result[name] = result[name].astype(object).where(result[name].notna(), None)
    return result


def sum_by(
    df: pd.DataFrame,
    by,
    measure: str,
    name: str,
    groups: Optional[Iterable] = None,
    ndigits: Optional[int] = None,
) -> pd.DataFrame:
    series = df.groupby(_keys(by))[measure].sum()
    return _finish(series, by, name, groups, fill_value=0, ndigits=ndigits)


def count_by(df: pd.DataFrame, by, name: str, groups: Optional[Iterable] = None) -> pd.DataFrame:
    series = df.groupby(_keys(by)).size()
    return _finish(series, by, name, groups, fill_value=0)


def mean_by(
    df: pd.DataFrame,
    by,
    measure: str,
    name: str,
    groups: Optional[Iterable] = None,
    ndigits: Optional[int] = None,
    half_up: bool = False,
) -> pd.DataFrame:
    """Average per group; groups with no rows report None instead of dividing by zero."""
    series = df.groupby(_keys(by))[measure].mean()
    return _finish(series, by, name, groups, fill_value=None, ndigits=ndigits, half_up=half_up)


def count_distinct_by(df: pd.DataFrame, by, column: str, name: str) -> pd.DataFrame:
    series = df.groupby(_keys(by))[column].nunique()
    return _finish(series, by, name, fill_value=0)


def min_max_by(df: pd.DataFrame, by, column: str) -> pd.DataFrame:
    result = df.groupby(_keys(by))[column].agg(["min", "max"])
    result.columns = [f"min_{column}", f"max_{column}"]
    return result.reset_index()


def overall_mean(values: pd.Series, ndigits: Optional[int] = None, half_up: bool = False) -> Optional[float]:
    """Mean of a column, or None when it has no values."""
    values = values.dropna()
    if values.empty:
        return None
    mean = float(values.mean())
    if ndigits is None:
        return mean
    return round_half_up(mean, ndigits) if half_up else round(mean, ndigits)
