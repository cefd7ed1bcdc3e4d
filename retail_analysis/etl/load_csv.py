from pathlib import Path
from typing import Mapping

import pandas as pd

from retail_analysis.logger import setup_logger
from retail_analysis.utils import build_output_path, result_filename
from retail_analysis.validations.input_schemas import BASE_COLUMNS

logger = setup_logger("retail_analysis.etl.load_csv")


def write_table_csv(df: pd.DataFrame, path: str | Path) -> None:
    """Write one table as CSV, creating the parent directory if needed."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)
    except PermissionError as e:
        logger.error(f"Permission denied writing {path}")
        raise PermissionError(f"Cannot write to {path}. Check directory permissions.") from e
    except OSError as e:
        logger.error(f"Unexpected error writing {path}: {str(e)}", exc_info=True)
        raise RuntimeError(f"Failed to write {path}: {str(e)}") from e


def write_transactions_csv(df: pd.DataFrame, path: str | Path) -> Path:
    """
    Export cleaned transactions with the base columns only.

    Derived columns (profit, shift, age group, ...) are recomputed on read,
    so the export can be ingested again and yields the same valid records.
    """
    path = Path(path)
    logger.info(f"Writing {len(df)} transactions to {path}")

    missing = [column for column in BASE_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"Cannot export transactions, missing columns: {missing}")

    export_df = df[BASE_COLUMNS].copy()

    # ISO dates keep the export independent of the reader's locale
    if len(export_df) > 0:
        export_df["sale_date"] = pd.to_datetime(export_df["sale_date"]).dt.strftime("%Y-%m-%d")

    write_table_csv(export_df, path)
    logger.info(f"Successfully written {path}")
    return path


def write_results_csv(results: Mapping[str, pd.DataFrame], output_dir: str | Path) -> dict[str, Path]:
    """
    Write one CSV per result table into output_dir.

    Empty results are written as header-only files. Returns name -> path.
    """
    if not results:
        logger.warning("No result tables to write")
        return {}

    written = {}
    for name, result_df in results.items():
        path = build_output_path(output_dir, result_filename(name))
        write_table_csv(result_df, path)
        logger.info(f"Wrote {name}: {len(result_df)} rows -> {path}")
        written[name] = path

    logger.info(f"{len(written)} result tables written to {output_dir}")
    return written
