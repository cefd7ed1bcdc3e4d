import pandera.pandas as pa
from pandera.pandas import Check, Column, DataFrameSchema

from retail_analysis.analysis.buckets import AGE_BUCKETS, SHIFTS


transactions_clean_schema = DataFrameSchema(
    {
        # Identifiers
        "transaction_id": Column(int, nullable=False, unique=True),
        "customer_id": Column(int, nullable=False),

        # Dimensions
        "gender": Column(str, nullable=False),
        "age": Column(int, Check.ge(0), nullable=False),
        "age_group": Column(str, Check.isin(AGE_BUCKETS), nullable=False),
        "category": Column(str, nullable=False),

        # Measures
        "quantity": Column(int, Check.gt(0), nullable=False),
        "price_per_unit": Column(float, Check.ge(0), nullable=False),
        "cogs": Column(float, Check.ge(0), nullable=False),
        "total_sale": Column(float, Check.ge(0), nullable=False),
        "profit": Column(float, nullable=False),  # Negative when sold below cost

        # Date dimensions
        "sale_date": Column(pa.DateTime, nullable=False),
        "sale_time": Column(str, nullable=False),
        "sale_hour": Column(int, Check.between(0, 23), nullable=False),
        "year": Column(int, nullable=False),
        "month": Column(int, Check.between(1, 12), nullable=False),
        "is_weekend": Column(bool, nullable=False),
        "shift": Column(str, Check.isin(SHIFTS), nullable=False),
    },
    strict=True
)
