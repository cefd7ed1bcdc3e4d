"""
Output path helpers.

Result file names are built in one place so the runner, the writers and the
tests agree on where each table lands.
"""

from pathlib import Path


def _strip_leading_slash(path: str) -> str:
    return path.lstrip("/") if path else ""


def result_filename(name: str) -> str:
    """
    File name for a named result table.

    Example:
        result_filename("Shift Revenue Ranking") -> "shift_revenue_ranking.csv"
    """
    stem = name.strip().lower().replace(" ", "_")
    if not stem:
        raise ValueError("Result name must not be empty")
    return stem if stem.endswith(".csv") else f"{stem}.csv"


def build_output_path(output_dir: str | Path, relative_path: str) -> Path:
    """
    Build a path inside the output directory.

    Example:
        build_output_path("output/", "/transactions_clean.csv")
        -> Path("output/transactions_clean.csv")
    """
    return Path(output_dir) / _strip_leading_slash(relative_path)
