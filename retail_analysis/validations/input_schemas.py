import pandera.pandas as pa
from pandera.pandas import Check, Column, DataFrameSchema


# H:MM, HH:MM or HH:MM:SS with the hour in 0-23
SALE_TIME_PATTERN = r"^([01]?\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


transactions_schema = DataFrameSchema(
    {
        # Identifiers
        "transaction_id": Column(int, nullable=False, unique=True, report_duplicates="exclude_first"),
        "customer_id": Column(int, nullable=False),

        # When
        "sale_date": Column(pa.DateTime, nullable=False),
        "sale_time": Column(str, Check.str_matches(SALE_TIME_PATTERN), nullable=False),

        # Customer attributes (denormalized onto the sale)
        "gender": Column(str, nullable=False),
        "age": Column(int, Check.ge(0), nullable=False),

        # Product
        "category": Column(str, nullable=False),

        # Measures
        "quantity": Column(int, Check.gt(0), nullable=False),
        "price_per_unit": Column(float, Check.ge(0), nullable=False),
        "cogs": Column(float, Check.ge(0), nullable=False),
        "total_sale": Column(float, Check.ge(0), nullable=False),  # Not cross-checked against qty * price
    },
    coerce=True,
    strict=False  # Allow extra columns (dropped during transform)
)


BASE_COLUMNS = list(transactions_schema.columns)
