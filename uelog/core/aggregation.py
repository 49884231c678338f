"""Deduplication, tallying and ordering of parsed log records.

The Aggregator folds LogRecords into an AggregateReport, recomputes the
per-type and per-category totals, and orders the unique entries by how
often they occurred.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Iterable

from uelog.models.record import AggregateReport, default_type_counts

if TYPE_CHECKING:
    from uelog.models.record import LogRecord

logger = logging.getLogger(__name__)

# Volatile "[timestamp][frame]" prefix directly in front of the Log marker
_VOLATILE_PREFIX_PATTERN = re.compile(r"\[[^\[\]]*\]\[[^\[\]]*\]\s*(?=Log)")

# Key used for entries without a category
GENERAL_CATEGORY = "general"


class ReportSortedError(Exception):
    """Raised when records are folded into a report that was already sorted."""


def strip_volatile_prefix(text: str) -> str:
    """Remove the first bracketed prefix pair preceding the Log marker.

    Args:
        text: A raw log line.

    Returns:
        The line without its ``[token][token]`` prefix.
    """
    return _VOLATILE_PREFIX_PATTERN.sub("", text, count=1)


def type_bucket(severity_type: str | None) -> str:
    """Map a severity type token to its count bucket.

    Args:
        severity_type: The record's type token, or None.

    Returns:
        "errors", "warnings", "general", or the lowercased custom type.
    """
    if severity_type is None:
        return "general"
    if severity_type == "Error":
        return "errors"
    if severity_type == "Warning":
        return "warnings"
    return severity_type.strip().lower()


def sort_by_count(entries: list[LogRecord]) -> list[LogRecord]:
    """Order entries by ascending occurrence count.

    Entries are grouped into buckets by count, the distinct counts are
    sorted, and the buckets are concatenated. Entries sharing a count keep
    their relative input order.

    Args:
        entries: Unique entries to order.

    Returns:
        A new list; the input list and its records are left untouched.
    """
    buckets: dict[int, list[LogRecord]] = {}
    for entry in entries:
        buckets.setdefault(entry.occurrence_count, []).append(entry)

    ordered: list[LogRecord] = []
    for count in sorted(buckets):
        ordered.extend(buckets[count])
    return ordered


def _count_sequence(entries: list[LogRecord]) -> str:
    return ",".join(str(entry.occurrence_count) for entry in entries)


class Aggregator:
    """Fold, tally and sort log records.

    The aggregator holds no state of its own; every operation works on the
    AggregateReport it is given, so one instance can serve any number of
    reports.
    """

    def fold(self, report: AggregateReport, records: Iterable[LogRecord]) -> AggregateReport:
        """Fold records into a report, merging duplicates.

        An incoming record is a duplicate of the first unique entry whose
        raw text, with its volatile prefix stripped, equals the incoming
        raw text as-is. Only the stored side is stripped, so a prefixed
        line folds a later bare line, but not the other way round.

        Args:
            report: The report to mutate.
            records: Records in input order.

        Returns:
            The same report, for chaining.

        Raises:
            ReportSortedError: If the report has already been sorted.
        """
        if report.is_sorted:
            raise ReportSortedError(
                "Cannot fold records into a report that has already been sorted"
            )

        index = report._index
        for record in records:
            report.total_count += 1

            position = index.get(record.raw_text)
            if position is None:
                report.unique_entries.append(record)
                key = strip_volatile_prefix(record.raw_text)
                index.setdefault(key, len(report.unique_entries) - 1)
            else:
                report.unique_entries[position].add_sibling(record.raw_text)

        return report

    def tally(self, report: AggregateReport) -> bool:
        """Recompute type and category totals from the unique entries.

        Each unique entry counts once, whatever its occurrence count.

        Args:
            report: The report to update.

        Returns:
            True if the type totals add up to the number of unique entries.
        """
        type_counts = default_type_counts()
        category_counts: dict[str, int] = {}

        for entry in report.unique_entries:
            bucket = type_bucket(entry.severity_type)
            type_counts[bucket] = type_counts.get(bucket, 0) + 1

            category = entry.category or GENERAL_CATEGORY
            category_counts[category] = category_counts.get(category, 0) + 1

        report.type_counts = type_counts
        report.category_counts = category_counts

        if sum(type_counts.values()) != len(report.unique_entries):
            logger.warning(
                "Type counts do not total: %d counted for %d unique entries",
                sum(type_counts.values()),
                len(report.unique_entries),
            )
            return False
        return True

    def sort(self, report: AggregateReport) -> AggregateReport:
        """Return a copy of the report with entries ordered by count.

        Args:
            report: A fully folded report.

        Returns:
            A new report marked as sorted. The input report is unchanged.
        """
        logger.debug("Counts before sorting: %s", _count_sequence(report.unique_entries))
        ordered = sort_by_count(report.unique_entries)
        logger.debug("Counts after sorting: %s", _count_sequence(ordered))

        out_of_place = sum(
            1 for current, following in zip(ordered, ordered[1:])
            if current.occurrence_count > following.occurrence_count
        )
        if out_of_place:
            logger.warning("List was sorted with %d elements out of place", out_of_place)
        else:
            logger.debug("Unique list was sorted successfully")

        return report.model_copy(
            update={"unique_entries": ordered, "is_sorted": True}
        )
