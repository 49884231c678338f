"""Rendering of parse summaries and final reports.

The formatter only reads reports. Filtering happens on a copy produced by
the FilterEngine, so the same sorted report can be rendered any number of
times.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from uelog.core.filter import FilterEngine
from uelog.models.filter_def import FilterConfig

if TYPE_CHECKING:
    from uelog.models.record import AggregateReport, LogRecord
    from uelog.utils.output import OutputSink


# Terminal styles by lowercased severity type
TYPE_STYLES = {
    "error": "red",
    "warning": "yellow",
    "display": "cyan",
    "log": "cyan",
    "verbose": "dim",
    "veryverbose": "dim",
}

_ABSENT = "(none)"


def entry_style(entry: LogRecord) -> str:
    """Get the terminal style for an entry based on its type."""
    if entry.severity_type is None:
        return "cyan"
    return TYPE_STYLES.get(entry.severity_type.lower(), "cyan")


def format_entry(entry: LogRecord) -> str:
    """Format one unique entry for the log list."""
    return (
        f"{entry.message or _ABSENT}\n"
        f"    Count: {entry.occurrence_count}\n"
        f"    Type: {entry.severity_type or _ABSENT}\n"
        f"    Category: {entry.category or _ABSENT}\n"
        f"    Original: {entry.raw_text}\n"
    )


def format_counts(counts: dict[str, int]) -> str:
    """Join a count mapping as ``key: value, key: value``."""
    return ", ".join(f"{key}: {value}" for key, value in counts.items())


class ReportFormatter:
    """Render aggregate reports to an OutputSink.

    Attributes:
        sink: Where text is written.
        filters: Type and category filters for the final report.
        log_list: Show the per-entry list on the terminal. The report file
            always receives it.
    """

    def __init__(
        self,
        sink: OutputSink,
        filters: FilterConfig | None = None,
        log_list: bool = True,
        engine: FilterEngine | None = None,
    ):
        self.sink = sink
        self.filters = filters or FilterConfig.passthrough()
        self.log_list = log_list
        self.engine = engine or FilterEngine()

    def render_summary(self, report: AggregateReport) -> None:
        """Print the immediate summary of a freshly parsed report.

        Args:
            report: A tallied report.
        """
        lowest, highest = report.count_range
        self.sink.print(
            f"{report.unique_count} unique entries ranging from counts of "
            f"{highest} to {lowest}"
        )
        unparsed = sum(1 for entry in report.unique_entries if not entry.is_parsed)
        if unparsed:
            self.sink.print(f"{unparsed} unique entries could not be decomposed")
        self.sink.print()

        for bucket, count in report.type_counts.items():
            self.sink.print(f"{count} {bucket}")
        self.sink.print()

        for category, count in report.category_counts.items():
            self.sink.print(f"{category} was logged to {count} times")

    def render_entries(self, entries: list[LogRecord], title: str) -> None:
        """Print a log list, highest occurrence count first.

        Args:
            entries: Entries sorted by ascending count.
            title: Section header.
        """
        self.sink.header(title, new_line=True, to_console=self.log_list)
        for entry in reversed(entries):
            self.sink.print(
                format_entry(entry),
                style=entry_style(entry),
                to_console=self.log_list,
            )

    def _render_totals(self, view: AggregateReport, sections: bool) -> None:
        self.sink.print(f"Log Count: {view.total_count}")
        self.sink.print(f"Unique Log Count: {view.unique_count}")

        categories = self.engine.filter_categories(
            view.category_counts, self.filters.category
        )
        if sections:
            self.sink.header("Log Types", new_line=True)
        else:
            self.sink.print("Log Types")
        self.sink.print(format_counts(view.type_counts))

        if sections:
            self.sink.header("Log Categories", new_line=True)
        else:
            self.sink.print("Log Categories")
        if categories:
            self.sink.print(format_counts(categories))

    def render_report(self, report: AggregateReport) -> AggregateReport:
        """Print the full report for a consolidated run.

        Args:
            report: The sorted consolidated report.

        Returns:
            The filtered view that was rendered.
        """
        view = self.engine.filter_report(report, self.filters)
        self.sink.header("Log Data", new_line=True)
        self._render_totals(view, sections=True)
        self.render_entries(view.unique_entries, "Log List")
        return view

    def render_reports(self, reports: list[AggregateReport]) -> list[AggregateReport]:
        """Print per-file summaries followed by per-file log lists.

        Args:
            reports: Sorted per-file reports in input order.

        Returns:
            The filtered views that were rendered, in the same order.
        """
        views = [self.engine.filter_report(report, self.filters) for report in reports]
        for view in views:
            self.sink.header(f"Log File Summary: {view.source_file}", new_line=True)
            self._render_totals(view, sections=False)
        for view in views:
            self.render_entries(view.unique_entries, f"Log List: {view.source_file}")
        return views
