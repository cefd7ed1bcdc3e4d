import pandas as pd
from pandera.errors import SchemaError, SchemaErrors

from .output_schemas import transactions_clean_schema
from .validate_inputs import drop_failed_rows
from retail_analysis.logger import setup_logger

logger = setup_logger("retail_analysis.validation.output")


def validate_transactions_clean(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """
    Validate the enriched analysis view before any query runs against it.
    """
    logger.info(f"Starting output validation on {len(df)} records")

    try:
        validated_df = transactions_clean_schema.validate(df, lazy=True)
        logger.info("Output validation passed")
        return validated_df, 0

    except SchemaErrors as err:
        failed = err.failure_cases

        logger.error(
            f"Output validation failed with {len(failed)} issues"
        )
        logger.error(
            f"Failure summary:\n{failed.groupby(['column', 'check']).size()}"
        )

        clean_df, invalid_count = drop_failed_rows(df, err)

        if clean_df.empty:
            raise ValueError(
                "All rows failed output validation, aborting analysis"
            )

        # Re-validate cleaned dataset
        try:
            clean_df = transactions_clean_schema.validate(clean_df)
            logger.info(
                f"Cleaned analysis view: {len(clean_df)} valid rows"
            )
        except (SchemaError, SchemaErrors):
            logger.warning("Could not clean all invalid rows. Returning best effort.")

        return clean_df, invalid_count
