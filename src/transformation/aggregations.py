"""
Ranking and Aggregation

Sorted views, top-N truncation and cross-record totals over an enriched
record sequence. None of these functions reorder or modify the sequence
they are given.
"""

from typing import List, Sequence, TypeVar

import polars as pl
from pydantic import BaseModel

RecordT = TypeVar("RecordT", bound=BaseModel)


def _field_frame(records: Sequence[BaseModel], field: str) -> pl.DataFrame:
    return pl.DataFrame(
        {field: [float(getattr(record, field)) for record in records]},
        schema={field: pl.Float64},
    )


def safe_divide(numerator: float, denominator: float) -> float:
    """Ratio of two numbers, 0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def sort_records(
    records: Sequence[RecordT],
    field: str,
    descending: bool = True,
) -> List[RecordT]:
    """
    Stable sort by a numeric field.

    Records with equal values keep their original relative order.

    Args:
        records: Enriched records
        field: Numeric attribute to sort by
        descending: Largest first (default)

    Returns:
        A new sorted list
    """
    if not records:
        return []

    order = (
        _field_frame(records, field)
        .with_row_index("position")
        .sort(field, descending=descending, maintain_order=True)
        .get_column("position")
        .to_list()
    )
    return [records[i] for i in order]


def top_n(records: Sequence[RecordT], n: int) -> List[RecordT]:
    """First n records; all of them when there are fewer than n."""
    if n <= 0:
        return []
    return list(records[:n])


def total(records: Sequence[BaseModel], field: str) -> float:
    """Sum of a numeric field across the whole sequence."""
    if not records:
        return 0.0
    return float(_field_frame(records, field).get_column(field).sum())


def share_of_total(records: Sequence[BaseModel], field: str) -> List[float]:
    """
    Each record's field as a percentage of the field's total.

    Shares are aligned with the input order. When the total is 0 every
    share is 0.
    """
    if not records:
        return []

    df = _field_frame(records, field)
    field_total = df.get_column(field).sum()

    if field_total == 0:
        return [0.0] * len(records)

    return (
        df.select((pl.col(field) / field_total * 100).alias("share"))
        .get_column("share")
        .to_list()
    )


def filter_positive(records: Sequence[RecordT], field: str) -> List[RecordT]:
    """Records whose field is strictly positive, in original order."""
    return [record for record in records if getattr(record, field) > 0]


def roas_tier(roas: float, high: float = 5.0, medium: float = 2.0) -> str:
    """Rate a ROAS value: above `high` is high, above `medium` is medium, else low"""
    if roas > high:
        return "high"
    if roas > medium:
        return "medium"
    return "low"
