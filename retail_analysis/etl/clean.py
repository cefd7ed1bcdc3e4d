import pandas as pd

from retail_analysis.logger import setup_logger
from retail_analysis.validations.input_schemas import BASE_COLUMNS

logger = setup_logger("retail_analysis.etl.clean")


def find_incomplete_records(df: pd.DataFrame) -> pd.DataFrame:
    """Rows with at least one null base field."""
    return df[df[BASE_COLUMNS].isna().any(axis=1)].copy()


def drop_incomplete_records(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """
    Filter out rows with any null base field.

    The input frame is left untouched; callers keep the raw records for
    auditing and analyse the returned view. Returns the complete rows and the
    number of skipped rows.
    """
    incomplete = df[BASE_COLUMNS].isna().any(axis=1)
    skipped = int(incomplete.sum())

    if skipped > 0:
        null_counts = df.loc[incomplete, BASE_COLUMNS].isna().sum()
        logger.warning(f"Skipped {skipped} incomplete records")
        logger.warning(f"Null values per column:\n{null_counts[null_counts > 0]}")

    complete_df = df[~incomplete].copy()
    logger.info(f"Complete records: {len(complete_df)} of {len(df)}")
    return complete_df, skipped
