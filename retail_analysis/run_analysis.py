"""
Retail sales analysis run.

Runs the full query set once against a transaction file:

    1. Extract: read the raw transaction file
    2. Clean: set aside records with null fields (raw data is never modified)
    3. Validate: coerce types, reject invalid records one by one
    4. Transform: derive profit, calendar fields, shift and age group
    5. Validate: final quality checks on the analysis view
    6. Analyse: answer every business question
    7. Export: write result tables, the cleaned dataset and the skipped records

Usage:
    retail-analysis --data data/retail_sales.csv
    retail-analysis --data data/retail_sales.csv --output-dir reports/
    retail-analysis --config my_config.yaml --ties include
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

from retail_analysis.analysis.queries import run_queries
from retail_analysis.analysis.ranking import TIE_POLICIES
from retail_analysis.etl.clean import drop_incomplete_records, find_incomplete_records
from retail_analysis.etl.extract_csv import extract_transactions
from retail_analysis.etl.load_csv import write_results_csv, write_table_csv, write_transactions_csv
from retail_analysis.etl.transform import transform_transactions
from retail_analysis.exceptions import AnalysisError
from retail_analysis.logger import set_log_level, setup_logger
from retail_analysis.settings import load_config
from retail_analysis.utils import build_output_path
from retail_analysis.validations.validate_inputs import validate_transactions
from retail_analysis.validations.validate_outputs import validate_transactions_clean


def run_analysis(
    source_path: str | Path,
    output_dir: str | Path,
    config: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """
    Run every stage once and return a summary of the run.

    The summary holds record counts per stage, the result tables keyed by
    query name, and the paths of every written file.
    """
    config = config if config is not None else load_config()
    data_cfg = config.get("data") or {}
    ties = (config.get("ranking") or {}).get("ties", "truncate")
    logger = setup_logger("retail_analysis.run")

    def stage(name: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AnalysisError as e:
            logger.error(f"✗ {name} failed: {e.detail}")
            raise
        except Exception as e:
            logger.error(f"✗ {name} failed: {str(e)}")
            raise AnalysisError(f"{name} failed: {str(e)}") from e

    stage("Configuration", set_log_level, (config.get("logging") or {}).get("level", "INFO"))

    raw_df = stage("Extraction", extract_transactions, source_path)
    logger.info(f"✓ Extracted {len(raw_df)} raw records")

    incomplete_df = stage("Cleaning", find_incomplete_records, raw_df)
    complete_df, skipped = stage("Cleaning", drop_incomplete_records, raw_df)
    logger.info(f"✓ Cleaning: {len(complete_df)} complete ({skipped} skipped)")

    valid_df, rejected = stage("Input validation", validate_transactions, complete_df)
    logger.info(f"✓ Input validation: {len(valid_df)} valid ({rejected} rejected)")

    view_df = stage("Transformation", transform_transactions, valid_df)
    view_df, dropped = stage("Output validation", validate_transactions_clean, view_df)
    if dropped > 0:
        logger.warning(f"  ⚠ {dropped} rows failed output validation and were excluded")
    logger.info(f"✓ Analysis view ready: {len(view_df)} records")

    results = stage("Analysis", run_queries, view_df, config.get("queries"), ties)
    logger.info(f"✓ Answered {len(results)} queries")

    written = stage("Export", write_results_csv, results, output_dir)
    clean_path = stage(
        "Export",
        write_transactions_csv,
        view_df,
        build_output_path(output_dir, data_cfg.get("clean_filename", "transactions_clean.csv")),
    )
    incomplete_path = build_output_path(output_dir, data_cfg.get("incomplete_filename", "incomplete_records.csv"))
    stage("Export", write_table_csv, incomplete_df, incomplete_path)

    logger.info(f"✓ Analysis SUCCESS: {len(results)} result tables written to {output_dir}")
    return {
        "raw_records": len(raw_df),
        "skipped_records": skipped,
        "rejected_records": rejected,
        "valid_records": len(view_df),
        "results": results,
        "files": {**written, "transactions_clean": clean_path, "incomplete_records": incomplete_path},
    }


def main(argv: Optional[list[str]] = None) -> int:
    """Command line entry point."""
    parser = argparse.ArgumentParser(
        description="Run the retail sales query set against a transaction file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --data data/retail_sales.csv
  %(prog)s --data data/retail_sales.csv --output-dir reports/
  %(prog)s --config my_config.yaml --ties include
        """
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: packaged config.yaml)"
    )

    parser.add_argument(
        "--data",
        type=Path,
        default=None,
        help="Transaction CSV file (default: data.source_path from config)"
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for result tables (default: data.output_dir from config)"
    )

    parser.add_argument(
        "--ties",
        choices=TIE_POLICIES,
        default=None,
        help="Tie policy at the ranking cut-off (default: ranking.ties from config)"
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error: could not load configuration: {e}", file=sys.stderr)
        return 2

    if args.ties:
        config["ranking"]["ties"] = args.ties

    source_path = args.data or config["data"].get("source_path")
    output_dir = args.output_dir or config["data"].get("output_dir", "output/")
    if not source_path:
        print("Error: no transaction file given (use --data or data.source_path)", file=sys.stderr)
        return 2

    try:
        run_analysis(source_path, output_dir, config)
    except AnalysisError as e:
        print(f"Error: {e.detail}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
