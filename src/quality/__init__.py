"""
Data Quality Module
"""
from .validators import (
    CorrelationResult,
    DatasetBinding,
    DatasetCorrelator,
    TableSchema,
    ValidationCheck,
)

__all__ = [
    "CorrelationResult",
    "DatasetBinding",
    "DatasetCorrelator",
    "TableSchema",
    "ValidationCheck",
]
