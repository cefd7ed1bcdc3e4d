"""
Pytest configuration and fixtures for the analysis tests.

This file is automatically discovered by pytest and provides
shared fixtures for all test modules.
"""

import pytest
import sys
from pathlib import Path

import pandas as pd

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from retail_analysis.etl.transform import transform_transactions
from retail_analysis.validations.validate_inputs import validate_transactions


COLUMNS = [
    "transaction_id", "sale_date", "sale_time", "customer_id", "gender", "age",
    "category", "quantity", "price_per_unit", "cogs", "total_sale",
]

# Eight valid sales across 2022-01, 2022-02, 2023-04 and 2023-05.
# 2022-01-08, 2022-01-15 and 2023-05-20 are Saturdays, 2022-02-13 is a Sunday.
VALID_ROWS = [
    ["1", "2022-01-03", "09:15:00", "101", "Male", "22", "Clothing", "2", "50", "20", "100"],
    ["2", "2022-01-08", "14:30:00", "102", "Female", "41", "Electronics", "4", "100", "120", "400"],
    ["3", "2022-01-08", "19:45:00", "101", "Male", "22", "Beauty", "1", "30", "10", "30"],
    ["4", "2022-01-15", "10:00:00", "103", "Female", "37", "Clothing", "5", "25", "40", "125"],
    ["5", "2022-02-02", "18:05:00", "101", "Male", "22", "Electronics", "1", "300", "100", "300"],
    ["6", "2022-02-13", "12:00:00", "102", "Female", "41", "Beauty", "3", "50", "30", "150"],
    ["7", "2023-04-10", "11:20:00", "104", "Male", "52", "Electronics", "2", "500", "300", "1000"],
    ["8", "2023-05-20", "16:00:00", "102", "Female", "41", "Electronics", "1", "25", "5", "25"],
]

# One incomplete record (no category) and two invalid ones
DIRTY_ROWS = [
    ["9", "2022-03-01", "10:00:00", "105", "Male", "30", None, "1", "10", "5", "10"],
    ["10", "2022-03-02", "11:00:00", "105", "Male", "30", "Beauty", "abc", "10", "5", "10"],
    ["11", "2022-03-03", "12:00:00", "106", "Female", "28", "Clothing", "2", "-5", "5", "10"],
]


@pytest.fixture
def valid_raw_df():
    """Raw records as read from CSV (all values are strings)."""
    return pd.DataFrame(VALID_ROWS, columns=COLUMNS)


@pytest.fixture
def dirty_raw_df():
    """Raw records including incomplete and invalid rows."""
    return pd.DataFrame(VALID_ROWS + DIRTY_ROWS, columns=COLUMNS)


@pytest.fixture
def analysis_view(valid_raw_df):
    """The validated and enriched view every query runs against."""
    validated_df, _ = validate_transactions(valid_raw_df)
    return transform_transactions(validated_df)


@pytest.fixture
def empty_view():
    """Analysis view for a dataset with no records."""
    validated_df, _ = validate_transactions(pd.DataFrame(columns=COLUMNS, dtype=str))
    return transform_transactions(validated_df)


@pytest.fixture
def transactions_csv(tmp_path, dirty_raw_df):
    """Dirty dataset written the way the source export looks (original headers)."""
    path = tmp_path / "retail_sales.csv"
    source_df = dirty_raw_df.rename(columns={"transaction_id": "transactions_id", "quantity": "quantiy"})
    source_df.to_csv(path, index=False)
    return path


@pytest.fixture
def sample_config(tmp_path):
    """Run configuration pointing at temporary locations."""
    return {
        "data": {
            "source_path": str(tmp_path / "retail_sales.csv"),
            "output_dir": str(tmp_path / "output"),
            "clean_filename": "transactions_clean.csv",
            "incomplete_filename": "incomplete_records.csv",
        },
        "ranking": {"ties": "truncate"},
        "logging": {"level": "INFO"},
        "queries": {},
    }
