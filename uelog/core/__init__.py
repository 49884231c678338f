"""Core logic for uelog.

This module provides the core functionality:
- parse_text / extract_lines / decompose_line: Log statement parsing
- Aggregator: Deduplication, tallying and sorting
- FilterEngine: Type and category filtering
- ReportFormatter: Summary and report rendering
- ParseSession / run: Orchestration of a whole run
- ConfigLoader: Configuration file loading
"""

from uelog.core.aggregation import (
    Aggregator,
    ReportSortedError,
    sort_by_count,
    strip_volatile_prefix,
    type_bucket,
)
from uelog.core.config import (
    Config,
    ConfigError,
    ConfigLoader,
    DisplayConfig,
    LoadingConfig,
    OutputConfig,
    ParsingConfig,
)
from uelog.core.filter import FilterEngine
from uelog.core.parser import decompose_line, extract_lines, parse_text
from uelog.core.pipeline import ParseSession, run
from uelog.core.report import ReportFormatter
from uelog.core.sources import LogSource, MissingSourceError, load_source

__all__ = [
    "Aggregator",
    "Config",
    "ConfigError",
    "ConfigLoader",
    "DisplayConfig",
    "FilterEngine",
    "LoadingConfig",
    "LogSource",
    "MissingSourceError",
    "OutputConfig",
    "ParseSession",
    "ParsingConfig",
    "ReportFormatter",
    "ReportSortedError",
    "decompose_line",
    "extract_lines",
    "load_source",
    "parse_text",
    "run",
    "sort_by_count",
    "strip_volatile_prefix",
    "type_bucket",
]
