from pathlib import Path

import pandas as pd

from retail_analysis.exceptions import IngestionError
from retail_analysis.logger import setup_logger
from retail_analysis.validations.input_schemas import BASE_COLUMNS

logger = setup_logger("retail_analysis.etl.extract_csv")

# Header spellings found in source exports -> canonical column names
COLUMN_ALIASES = {
    "transactions_id": "transaction_id",
    "quantiy": "quantity",
}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Lowercase column names, replace spaces with underscores and apply aliases.
    Returns a new DataFrame.
    """
    df = df.copy()
    df.columns = df.columns.str.strip().str.lower().str.replace(" ", "_")
    return df.rename(columns=COLUMN_ALIASES)


def extract_transactions(path: str | Path, sep: str = ",") -> pd.DataFrame:
    """
    Read the raw transaction file into a DataFrame with normalized columns.

    Values are read as-is; type coercion happens during validation so bad
    values can be reported per record instead of failing the whole read.
    """
    path = Path(path)
    logger.info(f"Extracting transactions from {path}")

    if not path.is_file():
        raise IngestionError(f"Transaction file not found: {path}")

    try:
        raw_df = pd.read_csv(path, sep=sep, dtype=str, skipinitialspace=True)
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise IngestionError(f"Could not parse {path}: {e}") from e
    except pd.errors.EmptyDataError:
        logger.warning(f"{path} is empty, continuing with no transactions")
        raw_df = pd.DataFrame(columns=BASE_COLUMNS, dtype=str)

    raw_df = normalize_columns(raw_df)
    logger.info(f"Successfully extracted {len(raw_df)} rows")
    logger.info(f"Normalized columns: {list(raw_df.columns)}")

    missing = [column for column in BASE_COLUMNS if column not in raw_df.columns]
    if missing:
        raise IngestionError(f"Transaction file {path} is missing columns: {missing}")

    return raw_df
