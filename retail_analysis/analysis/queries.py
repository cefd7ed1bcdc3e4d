"""
Business questions answered over the cleaned transaction view.

Each query takes the analysis view produced by transform_transactions and
returns a new DataFrame with named columns in a fixed order. Thresholds and
date ranges are keyword arguments so they can be overridden from config.

Descriptive statistics:
    dataset_summary, distinct_categories, age_range_by_gender,
    average_age, average_age_by_gender

Business questions:
    revenue_by_category, category_transactions_by_age, profitable_categories,
    top_sale_days_per_month, frequent_monthly_customers,
    average_price_by_category, weekend_bulk_transactions,
    multi_category_customers, most_popular_age_group,
    top_category_by_gender, shift_revenue_ranking
"""

from datetime import date
from typing import Any, Callable, Mapping, Optional

import pandas as pd

from retail_analysis.analysis.aggregations import (
    count_by,
    count_distinct_by,
    mean_by,
    min_max_by,
    overall_mean,
    sum_by,
)
from retail_analysis.analysis.buckets import AGE_BUCKETS, SHIFTS
from retail_analysis.analysis.ranking import rank_within_groups
from retail_analysis.logger import setup_logger
from retail_analysis.validations.input_schemas import BASE_COLUMNS

logger = setup_logger("retail_analysis.analysis.queries")

DateLike = str | date | pd.Timestamp


def _day(value: DateLike) -> pd.Timestamp:
    return pd.Timestamp(value).normalize()


def _sorted_desc(df: pd.DataFrame, column: str) -> pd.DataFrame:
    return df.sort_values(column, ascending=False, kind="mergesort").reset_index(drop=True)


# ------------------------------------------------------------------
# Descriptive statistics
# ------------------------------------------------------------------

def dataset_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Record, customer and category counts as a single row."""
    return pd.DataFrame(
        {
            "num_records": [len(df)],
            "num_customers": [df["customer_id"].nunique()],
            "num_categories": [df["category"].nunique()],
        }
    )


def distinct_categories(df: pd.DataFrame) -> pd.DataFrame:
    return pd.DataFrame({"category": sorted(df["category"].unique())}, dtype=object)


def age_range_by_gender(df: pd.DataFrame) -> pd.DataFrame:
    return min_max_by(df, "gender", "age")


# Ages are integers, so their averages are exact decimals and .5 rounds up
def average_age(df: pd.DataFrame) -> pd.DataFrame:
    return pd.DataFrame({"average_age": [overall_mean(df["age"], ndigits=0, half_up=True)]}, dtype=object)


def average_age_by_gender(df: pd.DataFrame) -> pd.DataFrame:
    return mean_by(df, "gender", "age", "average_age", ndigits=0, half_up=True)


# ------------------------------------------------------------------
# Business questions
# ------------------------------------------------------------------

def revenue_by_category(df: pd.DataFrame, year: Optional[int] = 2022) -> pd.DataFrame:
    """Total revenue per category for one calendar year, highest first."""
    if year is not None:
        df = df[df["year"] == int(year)]
    result = sum_by(df, "category", "total_sale", "total_revenue")
    return _sorted_desc(result, "total_revenue")


def category_transactions_by_age(
    df: pd.DataFrame,
    category: str = "Electronics",
    min_age: int = 40,
    start_date: DateLike = "2023-03-01",
    end_date: DateLike = "2023-06-30",
) -> pd.DataFrame:
    """
    Transactions in one category by customers older than min_age, with the
    sale date between start_date and end_date (both inclusive).
    """
    mask = (
        (df["category"] == category)
        & (df["age"] > min_age)
        & df["sale_date"].between(_day(start_date), _day(end_date))
    )
    return df.loc[mask, BASE_COLUMNS].reset_index(drop=True)


def profitable_categories(df: pd.DataFrame, min_profit: float = 50000) -> pd.DataFrame:
    """Categories whose total profit is above min_profit, highest first."""
    result = sum_by(df, "category", "profit", "profit_made", ndigits=2)
    result = result[result["profit_made"] > min_profit]
    return _sorted_desc(result, "profit_made")


def top_sale_days_per_month(df: pd.DataFrame, limit: int = 3, ties: str = "truncate") -> pd.DataFrame:
    """The highest-grossing sale days in every month."""
    daily = sum_by(df, ["year", "month", "sale_date"], "total_sale", "daily_total")
    ranked = rank_within_groups(
        daily, order_by="daily_total", partition_by=["year", "month"], limit=limit, ties=ties
    )
    if len(ranked) > 0:
        ranked["sale_date"] = ranked["sale_date"].dt.strftime("%Y-%m-%d")
    return ranked[["year", "month", "sale_date", "daily_total", "ranking"]]


def frequent_monthly_customers(df: pd.DataFrame, min_transactions: int = 5) -> pd.DataFrame:
    """Customers with more than min_transactions purchases in a single month."""
    result = count_by(df, ["customer_id", "year", "month"], "num_transactions")
    result = result[result["num_transactions"] > min_transactions]
    result = result.rename(columns={"month": "month_number"})
    return result.sort_values(["customer_id", "year", "month_number"]).reset_index(drop=True)


def average_price_by_category(df: pd.DataFrame, ndigits: int = 0) -> pd.DataFrame:
    result = mean_by(df, "category", "price_per_unit", "average_price", ndigits=ndigits)
    return _sorted_desc(result, "average_price")


def weekend_bulk_transactions(df: pd.DataFrame, min_quantity: int = 3) -> pd.DataFrame:
    """Transactions with more than min_quantity units sold on a Saturday or Sunday."""
    mask = (df["quantity"] > min_quantity) & df["is_weekend"]
    return df.loc[mask, BASE_COLUMNS].reset_index(drop=True)


def multi_category_customers(df: pd.DataFrame, min_categories: int = 3) -> pd.DataFrame:
    """Customers who bought from at least min_categories distinct categories."""
    result = count_distinct_by(df, "customer_id", "category", "purchased_categories")
    result = result[result["purchased_categories"] >= min_categories]
    return result.reset_index(drop=True)


def most_popular_age_group(df: pd.DataFrame) -> pd.DataFrame:
    """
    The age group with the most transactions. Equal counts resolve to the
    younger group, since groups are counted in AGE_BUCKETS order.
    """
    if df.empty:
        return pd.DataFrame({"age_group": pd.Series(dtype=object), "num_transactions": pd.Series(dtype="int64")})

    counts = count_by(df, "age_group", "num_transactions", groups=AGE_BUCKETS)
    ranked = rank_within_groups(counts, order_by="num_transactions", limit=1)
    return ranked[["age_group", "num_transactions"]]


def top_category_by_gender(df: pd.DataFrame, limit: int = 1, ties: str = "truncate") -> pd.DataFrame:
    """Best-selling categories for each gender, by total sales."""
    totals = sum_by(df, ["gender", "category"], "total_sale", "total_sale")
    ranked = rank_within_groups(totals, order_by="total_sale", partition_by="gender", limit=limit, ties=ties)
    return ranked[["gender", "category", "total_sale", "ranking"]]


def shift_revenue_ranking(df: pd.DataFrame) -> pd.DataFrame:
    """Revenue per shift (Morning / Afternoon / Evening), ranked highest first."""
    if df.empty:
        return pd.DataFrame(
            {
                "shift": pd.Series(dtype=object),
                "total_revenue": pd.Series(dtype=float),
                "ranking": pd.Series(dtype="int64"),
            }
        )

    revenue = sum_by(df, "shift", "total_sale", "total_revenue")
    # Keep shifts in day order so equal revenue ranks the earlier shift first
    order = {shift: position for position, shift in enumerate(SHIFTS)}
    revenue = revenue.sort_values("shift", key=lambda shifts: shifts.map(order)).reset_index(drop=True)
    ranked = rank_within_groups(revenue, order_by="total_revenue")
    return ranked[["shift", "total_revenue", "ranking"]]


# Fixed execution order for a full run
QUERIES: dict[str, Callable[..., pd.DataFrame]] = {
    "dataset_summary": dataset_summary,
    "distinct_categories": distinct_categories,
    "age_range_by_gender": age_range_by_gender,
    "average_age": average_age,
    "average_age_by_gender": average_age_by_gender,
    "revenue_by_category": revenue_by_category,
    "category_transactions_by_age": category_transactions_by_age,
    "profitable_categories": profitable_categories,
    "top_sale_days_per_month": top_sale_days_per_month,
    "frequent_monthly_customers": frequent_monthly_customers,
    "average_price_by_category": average_price_by_category,
    "weekend_bulk_transactions": weekend_bulk_transactions,
    "multi_category_customers": multi_category_customers,
    "most_popular_age_group": most_popular_age_group,
    "top_category_by_gender": top_category_by_gender,
    "shift_revenue_ranking": shift_revenue_ranking,
}

# Queries that accept a tie policy for their ranking step
RANKED_QUERIES = {"top_sale_days_per_month", "top_category_by_gender"}


def run_queries(
    df: pd.DataFrame,
    params: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ties: str = "truncate",
) -> dict[str, pd.DataFrame]:
    """
    Run every query in QUERIES order against the analysis view.

    params maps a query name to keyword overrides for that query; unknown
    query names are rejected.
    """
    params = dict(params or {})
    unknown = sorted(set(params) - set(QUERIES))
    if unknown:
        raise ValueError(f"Unknown queries in parameters: {unknown}")

    results = {}
    for name, query in QUERIES.items():
        kwargs = dict(params.get(name) or {})
        if name in RANKED_QUERIES:
            kwargs.setdefault("ties", ties)
        results[name] = query(df, **kwargs)
        logger.info(f"Query {name}: {len(results[name])} rows")

    logger.info(f"Completed {len(results)} queries")
    return results
