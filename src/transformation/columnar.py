"""
Columnar Row Reconstruction

Turns column-oriented query results into row records, preserving source
row order. Tables whose columns disagree on length are rejected instead of
being truncated or padded.
"""

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from src.domain.exceptions import MalformedTableError
from src.domain.models import Column

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def table_row_count(table: Optional[Sequence[Column]]) -> int:
    """
    Validated row count of a columnar table.

    The first column's length is the reference; any column of a different
    length, or a repeated column name, makes the table malformed.

    Returns:
        Number of logical rows (0 for an absent or column-less table)
    """
    if not table:
        return 0

    expected = len(table[0].values)
    seen = set()
    for column in table:
        if column.name in seen:
            raise MalformedTableError(
                f"Column '{column.name}' appears more than once",
                details={"column": column.name},
            )
        seen.add(column.name)

        if len(column.values) != expected:
            raise MalformedTableError(
                f"Column '{column.name}' has {len(column.values)} values, expected {expected}",
                details={
                    "column": column.name,
                    "expected_rows": expected,
                    "actual_rows": len(column.values),
                    "reference_column": table[0].name,
                },
            )

    return expected


def reconstruct_rows(table: Optional[Sequence[Column]]) -> List[Dict[str, Any]]:
    """
    Rebuild row records from a columnar table.

    Row i maps every column name to that column's i-th value. Field names are
    not checked here; schema validation belongs to the dataset correlator.

    Args:
        table: Ordered columns of one query result, or None

    Returns:
        Row dicts in source order; empty for an absent or empty table

    Raises:
        MalformedTableError: If columns disagree on length
    """
    row_count = table_row_count(table)
    if row_count == 0:
        return []

    names = [column.name for column in table]
    rows = [dict(zip(names, cells)) for cells in zip(*(column.values for column in table))]

    logger.debug("Rows reconstructed", columns=len(names), rows=len(rows))
    return rows


def bind_rows(rows: Sequence[Dict[str, Any]], model: Type[RecordT]) -> List[RecordT]:
    """
    Convert row dicts into typed records.

    Raises:
        MalformedTableError: If a cell cannot be coerced to the record's field type
    """
    records = []
    for index, row in enumerate(rows):
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            errors = e.errors(include_url=False)
            logger.warning(
                "Row failed record validation",
                record_type=model.__name__,
                row_index=index,
                errors=len(errors),
            )
            raise MalformedTableError(
                f"Row {index} is not a valid {model.__name__}",
                details={"row_index": index, "errors": [
                    {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                    for err in errors
                ]},
            ) from e
    return records
