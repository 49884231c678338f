"""Data models for uelog."""

from uelog.models.filter_def import FieldFilter, FilterConfig
from uelog.models.record import (
    DEFAULT_TYPE_BUCKETS,
    AggregateReport,
    LogRecord,
    default_type_counts,
)

__all__ = [
    "DEFAULT_TYPE_BUCKETS",
    "AggregateReport",
    "FieldFilter",
    "FilterConfig",
    "LogRecord",
    "default_type_counts",
]
