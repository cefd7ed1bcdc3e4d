"""
Top-N-per-partition ranking.

Groups items by a key, orders each group by a numeric measure (descending)
and keeps the top N. Equal measures keep their input order.

Two tie policies are supported at the cut-off:
    - "truncate" (default): keep exactly the first N items after the stable sort
    - "include": keep every item whose competition rank (SQL RANK()) is <= N,
      which can return more than N items when ties straddle the boundary
"""

import math
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence, TypeVar

import numpy as np
import pandas as pd

from retail_analysis.exceptions import RankingError

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

TIE_POLICIES = ("truncate", "include")


def _check_request(limit: Optional[int], ties: str) -> None:
    if ties not in TIE_POLICIES:
        raise RankingError(f"Unknown tie policy {ties!r}, expected one of {TIE_POLICIES}")
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
        raise RankingError(f"limit must be an integer >= 1, got {limit!r}")


def _finite(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise RankingError(f"Measure must be numeric, got {value!r}") from exc
    if isinstance(value, (str, bytes, bool)) or not math.isfinite(number):
        raise RankingError(f"Measure must be a finite number, got {value!r}")
    return number


def competition_ranks(values: Sequence[float]) -> list[int]:
    """
    SQL RANK() numbering for values already sorted in descending order.

    Example:
        competition_ranks([300, 200, 200, 100]) -> [1, 2, 2, 4]
    """
    ranks = []
    for position, value in enumerate(values, start=1):
        if position > 1 and value == values[position - 2]:
            ranks.append(ranks[-1])
        else:
            ranks.append(position)
    return ranks


def top_n_per_group(
    records: Iterable[T],
    group_key: Callable[[T], K],
    measure: Callable[[T], Any],
    limit: int,
    ties: str = "truncate",
) -> dict[K, list[T]]:
    """
    Return the top `limit` records of every group, highest measure first.

    Works on raw records or on pre-aggregated (key, value) pairs:
        top_n_per_group(pairs, itemgetter(0), itemgetter(1), limit=1)

    Groups appear in the order their first record was seen. Empty input gives
    an empty mapping.
    """
    if limit is None:
        raise RankingError("limit is required")
    _check_request(limit, ties)

    groups: dict[K, list[tuple[float, T]]] = {}
    for record in records:
        value = _finite(measure(record))
        groups.setdefault(group_key(record), []).append((value, record))

    result = {}
    for key, members in groups.items():
        # sorted() is stable, and stays stable with reverse=True
        ordered = sorted(members, key=lambda member: member[0], reverse=True)
        if ties == "truncate":
            kept = ordered[:limit]
        else:
            ranks = competition_ranks([value for value, _ in ordered])
            kept = [member for member, rank in zip(ordered, ranks) if rank <= limit]
        result[key] = [record for _, record in kept]
    return result


def rank_within_groups(
    df: pd.DataFrame,
    order_by: str,
    partition_by: Optional[str | list[str]] = None,
    limit: Optional[int] = None,
    ties: str = "truncate",
    rank_column: str = "ranking",
) -> pd.DataFrame:
    """
    DataFrame form of top_n_per_group, equivalent to

        RANK() OVER (PARTITION BY <partition_by> ORDER BY <order_by> DESC)

    followed by a filter on the rank. Adds `rank_column` holding the SQL rank.
    Without `partition_by` all rows share a single ranking; without `limit`
    every row is kept. Rows come back grouped by partition (ascending), highest
    measure first within each partition.
    """
    _check_request(limit, ties)

    measure = pd.to_numeric(df[order_by], errors="coerce").astype(float)
    if not np.isfinite(measure.to_numpy()).all():
        bad = df.loc[~np.isfinite(measure.to_numpy()), order_by].tolist()
        raise RankingError(f"Measure '{order_by}' must be finite, got {bad[:5]}")

    keys = [partition_by] if isinstance(partition_by, str) else list(partition_by or [])

    # Input position is the last sort key so equal measures keep input order
    ranked = df.reset_index(drop=True).assign(
        _measure=measure.to_numpy(),
        _input_position=np.arange(len(df)),
    )
    ranked = ranked.sort_values(
        keys + ["_measure", "_input_position"],
        ascending=[True] * len(keys) + [False, True],
    )

    if keys:
        grouped = ranked.groupby(keys, sort=False, dropna=False)
        position = grouped.cumcount() + 1
        rank = grouped["_measure"].rank(method="min", ascending=False)
    else:
        position = pd.Series(np.arange(1, len(ranked) + 1), index=ranked.index)
        rank = ranked["_measure"].rank(method="min", ascending=False)

    ranked[rank_column] = rank.astype("int64")

    if limit is not None:
        kept = position <= limit if ties == "truncate" else ranked[rank_column] <= limit
        ranked = ranked[kept]

    return ranked.drop(columns=["_measure", "_input_position"]).reset_index(drop=True)
