import pandas as pd
from pandera.errors import SchemaError, SchemaErrors

from .input_schemas import transactions_schema
from retail_analysis.logger import setup_logger

logger = setup_logger("retail_analysis.validation.input")


def drop_failed_rows(df: pd.DataFrame, err: SchemaErrors) -> tuple[pd.DataFrame, int]:
    """
    Drop every row referenced by a lazy validation failure.

    Failures that are not tied to a row (missing column, column dtype) are
    logged but leave the frame untouched.
    """
    failed = err.failure_cases
    failed_indices = failed["index"].dropna().unique() if len(failed) > 0 else []

    for index, cases in failed.dropna(subset=["index"]).groupby("index", sort=True):
        problems = ", ".join(
            f"{column}: {check} ({value!r})"
            for column, check, value in zip(cases["column"], cases["check"], cases["failure_case"])
        )
        logger.warning(f"Rejected record at row {index}: {problems}")

    if len(failed_indices) > 0:
        return df.drop(index=failed_indices), len(failed_indices)
    return df.copy(), 0


def validate_transactions(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """
    Validate complete transaction records and coerce them to their column types.

    Returns the valid rows and the number of rejected rows. Invalid records are
    reported one by one and skipped; the remaining records are kept.
    """
    logger.info(f"Starting transaction validation on {len(df)} rows")
    try:
        validated_df = transactions_schema.validate(df, lazy=True)
        logger.info("Transaction validation passed")
        return validated_df, 0

    except SchemaErrors as err:
        failed = err.failure_cases
        logger.warning(f"Transaction validation failed: {len(failed)} issues")
        logger.warning(f"Errors summary:\n{failed.groupby(['column', 'check']).size()}")

        clean_df, invalid_count = drop_failed_rows(df, err)

        try:
            clean_df = transactions_schema.validate(clean_df)  # re-validate (and coerce) clean data
            logger.info(f"Cleaned transactions: {len(clean_df)} rows remaining ({invalid_count} rejected)")
        except (SchemaError, SchemaErrors):
            logger.warning("Could not clean all invalid rows. Returning best effort.")

        return clean_df, invalid_count
