"""
Fixed labelled buckets used for grouping transactions.

Age groups and sale shifts are plain total functions over their domain so
they can be applied element-wise to a column or called on a single value.
"""

import numbers

import pandas as pd


AGE_BUCKETS = ["18-25", "26-35", "36-45", "46-60", "60+"]

# Inclusive (low, high, label) ranges; any other non-negative age falls into "60+"
_AGE_RANGES = [
    (18, 25, "18-25"),
    (26, 35, "26-35"),
    (36, 45, "36-45"),
    (46, 60, "46-60"),
]

SHIFTS = ["Morning", "Afternoon", "Evening"]


def _as_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{field} must be an integer, got {value!r}")
    return int(value)


def age_bucket(age) -> str:
    """
    Map an age to its age group label.

    Example:
        age_bucket(45) -> "36-45"
        age_bucket(60) -> "46-60"
        age_bucket(61) -> "60+"

    Ages below 18 share the catch-all "60+" label. Negative ages are rejected.
    """
    age = _as_int(age, "age")
    if age < 0:
        raise ValueError(f"age must be non-negative, got {age}")

    for low, high, label in _AGE_RANGES:
        if low <= age <= high:
            return label
    return "60+"


def sale_shift(hour) -> str:
    """Map an hour of day (0-23) to Morning, Afternoon or Evening."""
    hour = _as_int(hour, "hour")
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be between 0 and 23, got {hour}")

    if hour < 12:
        return "Morning"
    if hour <= 17:
        return "Afternoon"
    return "Evening"


def age_groups(ages: pd.Series) -> pd.Series:
    return ages.map(age_bucket).astype(object)


def sale_shifts(hours: pd.Series) -> pd.Series:
    return hours.map(sale_shift).astype(object)
