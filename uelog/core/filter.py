"""FilterEngine for applying type and category filters to reports.

Filtering produces a new view of a sorted report; the report itself is
never modified.
"""

from __future__ import annotations

from uelog.core.aggregation import GENERAL_CATEGORY, type_bucket
from uelog.models.filter_def import FieldFilter, FilterConfig
from uelog.models.record import AggregateReport, LogRecord, default_type_counts


class FilterEngine:
    """Engine for applying allow/deny filters to aggregated log entries."""

    def is_excluded(self, record: LogRecord, filters: FilterConfig) -> bool:
        """Check whether a record is hidden by the filters.

        Args:
            record: The record to check.
            filters: Type and category filter configuration.

        Returns:
            True if either the type or the category filter excludes it.
        """
        return (
            filters.type.excludes(record.severity_type)
            or filters.category.excludes(record.category)
        )

    def filter_entries(
        self,
        entries: list[LogRecord],
        filters: FilterConfig,
    ) -> list[LogRecord]:
        """Return the entries that survive the filters, order preserved."""
        return [entry for entry in entries if not self.is_excluded(entry, filters)]

    def filter_report(
        self,
        report: AggregateReport,
        filters: FilterConfig,
    ) -> AggregateReport:
        """Build the filtered view of a report.

        Removed entries take their whole occurrence count with them: the
        total count drops by each removed entry's count, and the view's
        type and category totals are weighted by occurrence count.

        Args:
            report: A sorted report.
            filters: Type and category filter configuration.

        Returns:
            A new report holding only the surviving entries.
        """
        kept = self.filter_entries(report.unique_entries, filters)
        removed_count = sum(
            entry.occurrence_count for entry in report.unique_entries
        ) - sum(entry.occurrence_count for entry in kept)

        type_counts = default_type_counts()
        category_counts: dict[str, int] = {}
        for entry in kept:
            bucket = type_bucket(entry.severity_type)
            type_counts[bucket] = type_counts.get(bucket, 0) + entry.occurrence_count
            category = entry.category or GENERAL_CATEGORY
            category_counts[category] = (
                category_counts.get(category, 0) + entry.occurrence_count
            )

        return AggregateReport(
            total_count=report.total_count - removed_count,
            unique_entries=kept,
            category_counts=category_counts,
            type_counts=type_counts,
            source_file=report.source_file,
            is_sorted=report.is_sorted,
        )

    def filter_categories(
        self,
        category_counts: dict[str, int],
        category_filter: FieldFilter,
    ) -> dict[str, int]:
        """Filter a category breakdown on its own.

        The "general" bucket stands for entries without a category, so it
        follows the filter's allow_undefined rule.

        Args:
            category_counts: Mapping of category to count.
            category_filter: The category filter.

        Returns:
            A new mapping with excluded categories removed.
        """
        result: dict[str, int] = {}
        for category, count in category_counts.items():
            value = None if category == GENERAL_CATEGORY else category
            if not category_filter.excludes(value):
                result[category] = count
        return result
