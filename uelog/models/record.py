"""LogRecord and AggregateReport data models for uelog.

These models represent the core data structures produced by the parser
and consumed by the aggregator, filter and report formatter.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

# Type buckets every report starts with; custom types are added on demand
DEFAULT_TYPE_BUCKETS = ("errors", "warnings", "verbose", "general")


def default_type_counts() -> dict[str, int]:
    """Return a fresh mapping with every fixed type bucket at zero."""
    return {bucket: 0 for bucket in DEFAULT_TYPE_BUCKETS}


class LogRecord(BaseModel):
    """One decomposed log statement, possibly folded with its duplicates.

    Attributes:
        category: Subsystem name from the ``LogX:`` marker (e.g. "Temp").
        severity_type: Type token after the category (e.g. "Error",
            "Warning", "Display" or a custom token).
        message: Remaining text after the category and type.
        raw_text: The matched statement from the Log marker onward, used as
            the dedup identity.
        sibling_texts: Raw texts of every duplicate folded into this record
            after the first occurrence.
    """

    model_config = ConfigDict(frozen=False)

    category: Optional[str] = None
    severity_type: Optional[str] = None
    message: Optional[str] = None
    raw_text: str
    sibling_texts: list[str] = Field(default_factory=list)

    @property
    def occurrence_count(self) -> int:
        """Number of raw lines folded into this record."""
        return 1 + len(self.sibling_texts)

    @property
    def is_parsed(self) -> bool:
        """True when the line matched the full category/type/message pattern."""
        return not (
            self.category is None
            and self.severity_type is None
            and self.message is None
        )

    def add_sibling(self, raw_text: str) -> None:
        """Fold a duplicate occurrence into this record."""
        self.sibling_texts.append(raw_text)


class AggregateReport(BaseModel):
    """One scope of aggregation: a single file, or every file consolidated.

    Attributes:
        total_count: Number of raw log lines seen (not unique entries).
        unique_entries: Deduplicated records, first-seen order until sorted.
        category_counts: Unique entries per category.
        type_counts: Unique entries per type bucket.
        source_file: Source name when reports are kept per file.
        is_sorted: Set once the report has been ordered by occurrence count.
    """

    model_config = ConfigDict(frozen=False)

    total_count: int = 0
    unique_entries: list[LogRecord] = Field(default_factory=list)
    category_counts: dict[str, int] = Field(default_factory=dict)
    type_counts: dict[str, int] = Field(default_factory=default_type_counts)
    source_file: Optional[str] = None
    is_sorted: bool = False

    # stripped raw text -> index of the first unique entry carrying it
    _index: dict[str, int] = PrivateAttr(default_factory=dict)

    @property
    def unique_count(self) -> int:
        """Number of unique entries."""
        return len(self.unique_entries)

    @property
    def count_range(self) -> tuple[int, int]:
        """Lowest and highest occurrence count, or (0, 0) when empty."""
        if not self.unique_entries:
            return (0, 0)
        counts = [entry.occurrence_count for entry in self.unique_entries]
        return (min(counts), max(counts))
