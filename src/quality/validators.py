"""
Dataset Validation Module

Binds each columnar table returned by the analytics endpoint to the dataset
expected for the query at the same position, and blocks the pipeline when
data is missing or shaped wrong.

Features:
- Schema validation (expected columns present)
- Row count checks (required datasets must not be empty)
- Typed record binding per dataset
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Type

import structlog
from pydantic import BaseModel

from src.domain.exceptions import DataUnavailableError, SchemaMismatchError
from src.domain.models import Column
from src.transformation.columnar import bind_rows, reconstruct_rows, table_row_count

logger = structlog.get_logger(__name__)


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"  # Blocks the fetch cycle
    WARNING = "warning"  # Logged but continues
    INFO = "info"  # Passed


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class TableSchema:
    """
    Expected shape of one query result.

    Only the listed columns are required; extra columns are allowed and
    ignored when binding.
    """
    name: str
    columns: Sequence[str]

    def validate(self, table: Sequence[Column]) -> ValidationCheck:
        """Check that every expected column is present"""
        present = {column.name for column in table}
        missing = [name for name in self.columns if name not in present]
        extra = [column.name for column in table if column.name not in self.columns]

        if missing:
            return ValidationCheck(
                name=f"schema_{self.name}",
                passed=False,
                severity=ValidationSeverity.ERROR,
                message=f"Dataset '{self.name}' is missing columns: {', '.join(missing)}",
                details={"missing": missing, "present": sorted(present)},
            )

        return ValidationCheck(
            name=f"schema_{self.name}",
            passed=True,
            severity=ValidationSeverity.WARNING if extra else ValidationSeverity.INFO,
            message=f"Dataset '{self.name}' matches its schema",
            details={"extra": extra} if extra else None,
        )


@dataclass(frozen=True)
class DatasetBinding:
    """A query's schema paired with the record type its rows bind to."""
    key: str
    schema: TableSchema
    model: Type[BaseModel]
    required: bool = True


@dataclass
class CorrelationResult:
    """Typed records per dataset key plus the checks that were run"""
    datasets: Dict[str, List[BaseModel]]
    checks: List[ValidationCheck] = field(default_factory=list)

    def __getitem__(self, key: str) -> List[BaseModel]:
        return self.datasets[key]


class DatasetCorrelator:
    """
    Correlates query results with their dataset bindings.

    Table k is bound to binding k. An empty result list, an absent required
    table, or a required table with no rows raises DataUnavailableError;
    missing columns raise SchemaMismatchError.

    Example:
        correlator = DatasetCorrelator([
            DatasetBinding("channels", CHANNEL_TABLE, ChannelRecord),
        ])
        result = correlator.correlate(response.data)
        channels = result["channels"]
    """

    def __init__(self, bindings: Sequence[DatasetBinding]):
        if not bindings:
            raise ValueError("At least one dataset binding is required")
        self.bindings = list(bindings)

    def correlate(
        self,
        tables: Optional[Sequence[Optional[Sequence[Column]]]],
    ) -> CorrelationResult:
        """
        Validate and bind all tables.

        Args:
            tables: Query results in submission order

        Returns:
            CorrelationResult with typed records per binding key
        """
        tables = list(tables or [])
        if not tables:
            logger.warning("Analytics response contained no tables")
            raise DataUnavailableError(details={"expected_tables": len(self.bindings)})

        if len(tables) > len(self.bindings):
            logger.warning(
                "Ignoring surplus tables",
                expected=len(self.bindings),
                received=len(tables),
            )

        datasets: Dict[str, List[BaseModel]] = {}
        checks: List[ValidationCheck] = []

        for index, binding in enumerate(self.bindings):
            table = tables[index] if index < len(tables) else None
            datasets[binding.key] = self._bind(index, binding, table, checks)

        logger.info(
            "Datasets correlated",
            datasets={key: len(records) for key, records in datasets.items()},
        )
        return CorrelationResult(datasets=datasets, checks=checks)

    def _bind(
        self,
        index: int,
        binding: DatasetBinding,
        table: Optional[Sequence[Column]],
        checks: List[ValidationCheck],
    ) -> List[BaseModel]:
        """Validate a single table against its binding and build records"""
        row_count = table_row_count(table)

        if row_count == 0:
            check = ValidationCheck(
                name=f"rows_{binding.key}",
                passed=not binding.required,
                severity=ValidationSeverity.ERROR if binding.required else ValidationSeverity.WARNING,
                message=f"Dataset '{binding.key}' has no rows",
                details={"position": index, "absent": table is None},
            )
            checks.append(check)
            if binding.required:
                logger.warning(check.message, position=index, absent=table is None)
                raise DataUnavailableError(details={"dataset": binding.key, "position": index})
            return []

        check = binding.schema.validate(table)
        checks.append(check)
        if not check.passed:
            logger.warning(check.message, position=index)
            raise SchemaMismatchError(check.message, details=check.details)
        if check.details:
            logger.debug("Extra columns ignored", dataset=binding.key, **check.details)

        return bind_rows(reconstruct_rows(table), binding.model)
