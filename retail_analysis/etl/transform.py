import pandas as pd

from retail_analysis.analysis.buckets import age_groups, sale_shifts
from retail_analysis.logger import setup_logger

logger = setup_logger("retail_analysis.etl.transform")


def profit(df: pd.DataFrame) -> pd.Series:
    """Profit per transaction: total_sale - cogs. Always recomputed, never stored."""
    return df["total_sale"] - df["cogs"]


def transform_transactions(df: pd.DataFrame) -> pd.DataFrame:
    """
    Build the analysis view from validated transactions.

    Returns a new DataFrame; the validated frame is not modified.
    """
    logger.info("Starting transformation and enrichment")
    df = df.copy()

    # --------------------------------------------------
    # 1. Calendar dimensions from sale_date
    # --------------------------------------------------
    # year/month drive the monthly rankings; weekend is Saturday or Sunday
    # (dayofweek 5 and 6, Monday = 0).
    df["sale_date"] = pd.to_datetime(df["sale_date"]).dt.normalize()
    df["year"] = df["sale_date"].dt.year.astype("int64")
    df["month"] = df["sale_date"].dt.month.astype("int64")
    df["is_weekend"] = df["sale_date"].dt.dayofweek.isin([5, 6]).astype(bool)

    # --------------------------------------------------
    # 2. Hour of sale and shift
    # --------------------------------------------------
    # sale_time is validated as H:MM, HH:MM or HH:MM:SS, so the hour is the
    # part before the first colon.
    # Example: "19:10:00" -> hour 19 -> "Evening"
    df["sale_hour"] = df["sale_time"].astype(str).str.split(":").str[0].astype("int64")
    df["shift"] = sale_shifts(df["sale_hour"])
    logger.info(f"Shift distribution: {df['shift'].value_counts().to_dict()}")

    # --------------------------------------------------
    # 3. Age groups
    # --------------------------------------------------
    df["age_group"] = age_groups(df["age"])

    # --------------------------------------------------
    # 4. Profit
    # --------------------------------------------------
    df["profit"] = profit(df).astype(float)
    logger.info(f"Profit calculated: ${df['profit'].sum():,.2f} total")

    # --------------------------------------------------
    # 5. Final column selection and ordering
    # --------------------------------------------------
    # Identifiers -> Dimensions -> Measures -> Temporal dimensions
    final_columns = [
        "transaction_id",
        "customer_id",

        "gender",
        "age",
        "age_group",
        "category",

        "quantity",
        "price_per_unit",
        "cogs",
        "total_sale",
        "profit",

        "sale_date",
        "sale_time",
        "sale_hour",
        "year",
        "month",
        "is_weekend",
        "shift",
    ]

    final_df = df[final_columns]
    logger.info(f"Transformation completed: {len(final_df)} records ready for analysis")

    return final_df
