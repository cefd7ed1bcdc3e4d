"""
Unit tests for ETL functions.

Tests validate that extract, clean, transform and load functions handle
data correctly, never modify their inputs, and that a cleaned export can be
ingested again unchanged.
"""

import logging

import pytest
import pandas as pd
from datetime import datetime

from retail_analysis.etl.clean import drop_incomplete_records, find_incomplete_records
from retail_analysis.etl.extract_csv import extract_transactions, normalize_columns
from retail_analysis.etl.load_csv import write_results_csv, write_transactions_csv
from retail_analysis.etl.transform import profit, transform_transactions
from retail_analysis.exceptions import IngestionError
from retail_analysis.utils import build_output_path, result_filename
from retail_analysis.validations.input_schemas import BASE_COLUMNS
from retail_analysis.validations.validate_inputs import validate_transactions


class TestExtract:
    """Test suite for extract_transactions."""

    def test_extract_normalizes_source_headers(self, transactions_csv):
        """transactions_id and quantiy are renamed to their canonical names."""
        df = extract_transactions(transactions_csv)
        assert "transaction_id" in df.columns
        assert "quantity" in df.columns
        assert len(df) == 11

    def test_extract_reads_values_as_strings(self, transactions_csv):
        df = extract_transactions(transactions_csv)
        assert df.loc[0, "quantity"] == "2"
        assert pd.isna(df.loc[8, "category"])

    def test_normalize_columns(self):
        df = pd.DataFrame(columns=[" Transactions_ID", "Sale Date", "QUANTIY"])
        assert list(normalize_columns(df).columns) == ["transaction_id", "sale_date", "quantity"]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(IngestionError):
            extract_transactions(tmp_path / "missing.csv")

    def test_missing_columns_raise(self, tmp_path):
        path = tmp_path / "partial.csv"
        path.write_text("transactions_id,sale_date\n1,2022-01-01\n")
        with pytest.raises(IngestionError, match="missing columns"):
            extract_transactions(path)

    def test_header_only_file_gives_empty_frame(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text(",".join(BASE_COLUMNS) + "\n")
        assert extract_transactions(path).empty

    def test_blank_file_gives_empty_frame(self, tmp_path):
        path = tmp_path / "blank.csv"
        path.write_text("")
        df = extract_transactions(path)
        assert df.empty
        assert list(df.columns) == BASE_COLUMNS


class TestClean:
    """Test suite for incomplete-record filtering."""

    def test_incomplete_records_skipped_and_counted(self, dirty_raw_df):
        complete_df, skipped = drop_incomplete_records(dirty_raw_df)
        assert skipped == 1
        assert len(complete_df) == 10
        assert "9" not in complete_df["transaction_id"].tolist()

    def test_skipped_count_logged(self, dirty_raw_df, caplog):
        with caplog.at_level(logging.WARNING, logger="retail_analysis.etl.clean"):
            drop_incomplete_records(dirty_raw_df)
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert "Skipped 1 incomplete records" in warnings

    def test_raw_frame_not_modified(self, dirty_raw_df):
        before = dirty_raw_df.copy()
        drop_incomplete_records(dirty_raw_df)
        pd.testing.assert_frame_equal(dirty_raw_df, before)

    def test_find_incomplete_records(self, dirty_raw_df):
        incomplete = find_incomplete_records(dirty_raw_df)
        assert incomplete["transaction_id"].tolist() == ["9"]

    def test_any_null_field_excludes_record(self, valid_raw_df):
        df = valid_raw_df.copy()
        df.loc[0, "total_sale"] = None
        df.loc[1, "sale_time"] = None
        complete_df, skipped = drop_incomplete_records(df)
        assert skipped == 2
        assert complete_df["transaction_id"].tolist() == ["3", "4", "5", "6", "7", "8"]

    def test_empty_frame(self):
        complete_df, skipped = drop_incomplete_records(pd.DataFrame(columns=BASE_COLUMNS))
        assert complete_df.empty
        assert skipped == 0


class TestTransform:
    """Test suite for transform_transactions."""

    def test_profit_is_total_sale_minus_cogs(self, analysis_view):
        assert analysis_view["profit"].tolist() == [80.0, 280.0, 20.0, 85.0, 200.0, 120.0, 700.0, 20.0]
        pd.testing.assert_series_equal(profit(analysis_view), analysis_view["profit"], check_names=False)

    def test_calendar_fields(self, analysis_view):
        assert analysis_view["year"].tolist() == [2022] * 6 + [2023] * 2
        assert analysis_view["month"].tolist() == [1, 1, 1, 1, 2, 2, 4, 5]
        assert analysis_view["is_weekend"].tolist() == [False, True, True, True, False, True, False, True]

    def test_sale_hour_and_shift(self, analysis_view):
        assert analysis_view["sale_hour"].tolist() == [9, 14, 19, 10, 18, 12, 11, 16]
        assert analysis_view["shift"].tolist() == [
            "Morning", "Afternoon", "Evening", "Morning",
            "Evening", "Afternoon", "Morning", "Afternoon",
        ]

    def test_age_groups(self, analysis_view):
        assert analysis_view["age_group"].tolist() == [
            "18-25", "36-45", "18-25", "36-45", "18-25", "36-45", "46-60", "36-45",
        ]

    def test_sale_date_is_datetime(self, analysis_view):
        assert isinstance(analysis_view.iloc[0]["sale_date"], datetime)

    def test_output_column_order(self, analysis_view):
        assert list(analysis_view.columns) == [
            "transaction_id", "customer_id", "gender", "age", "age_group", "category",
            "quantity", "price_per_unit", "cogs", "total_sale", "profit",
            "sale_date", "sale_time", "sale_hour", "year", "month", "is_weekend", "shift",
        ]

    def test_validated_frame_not_modified(self, valid_raw_df):
        validated_df, _ = validate_transactions(valid_raw_df)
        before = validated_df.copy()
        transform_transactions(validated_df)
        pd.testing.assert_frame_equal(validated_df, before)

    def test_empty_frame(self, empty_view):
        assert empty_view.empty
        assert "shift" in empty_view.columns


class TestLoad:
    """Test suite for CSV export."""

    def test_export_contains_base_columns_only(self, analysis_view, tmp_path):
        path = write_transactions_csv(analysis_view, tmp_path / "clean.csv")
        exported = pd.read_csv(path)
        assert list(exported.columns) == BASE_COLUMNS
        assert exported["sale_date"].tolist()[0] == "2022-01-03"

    def test_round_trip_is_idempotent(self, transactions_csv, tmp_path):
        """Ingest, clean, export, ingest again: the valid records are identical."""
        complete_df, _ = drop_incomplete_records(extract_transactions(transactions_csv))
        first_df, _ = validate_transactions(complete_df)

        path = write_transactions_csv(first_df, tmp_path / "clean.csv")

        complete_again, skipped = drop_incomplete_records(extract_transactions(path))
        second_df, rejected = validate_transactions(complete_again)

        assert skipped == 0
        assert rejected == 0
        pd.testing.assert_frame_equal(
            first_df[BASE_COLUMNS].reset_index(drop=True),
            second_df[BASE_COLUMNS].reset_index(drop=True),
        )

    def test_export_missing_columns_raises(self, tmp_path):
        with pytest.raises(ValueError):
            write_transactions_csv(pd.DataFrame({"transaction_id": [1]}), tmp_path / "x.csv")

    def test_write_results_creates_one_file_per_table(self, tmp_path):
        results = {
            "revenue_by_category": pd.DataFrame({"category": ["A"], "total_revenue": [10.0]}),
            "multi_category_customers": pd.DataFrame(columns=["customer_id", "purchased_categories"]),
        }
        written = write_results_csv(results, tmp_path / "out")
        assert written["revenue_by_category"] == tmp_path / "out" / "revenue_by_category.csv"
        empty = pd.read_csv(written["multi_category_customers"])
        assert list(empty.columns) == ["customer_id", "purchased_categories"]
        assert empty.empty

    def test_write_no_results(self, tmp_path):
        assert write_results_csv({}, tmp_path) == {}


class TestPaths:
    """Test suite for output path helpers."""

    def test_result_filename(self):
        assert result_filename("Shift Revenue Ranking") == "shift_revenue_ranking.csv"
        assert result_filename("summary.csv") == "summary.csv"

    def test_result_filename_rejects_empty(self):
        with pytest.raises(ValueError):
            result_filename("  ")

    def test_build_output_path_strips_leading_slash(self, tmp_path):
        assert build_output_path(tmp_path, "/clean.csv") == tmp_path / "clean.csv"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
