"""Run orchestration: load, parse, aggregate, sort and report.

ParseSession owns the aggregation state for one run. Whether files are
consolidated into one report or kept apart is decided when the session is
created and cannot change afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from uelog.core.aggregation import Aggregator, ReportSortedError
from uelog.core.parser import parse_text
from uelog.core.report import ReportFormatter
from uelog.core.sources import MissingSourceError, load_source
from uelog.models.record import AggregateReport

if TYPE_CHECKING:
    from uelog.core.config import Config
    from uelog.utils.output import OutputSink

logger = logging.getLogger(__name__)


class ParseSession:
    """Accumulates parsed files into one or more aggregate reports.

    Example usage:
        session = ParseSession(consolidate=False)
        session.add_text(text_a, "a.log")
        session.add_text(text_b, "b.log")
        reports = session.finish()  # one sorted report per file
    """

    def __init__(self, consolidate: bool = True, aggregator: Optional[Aggregator] = None):
        """Initialize the session.

        Args:
            consolidate: Merge every file into a single report.
            aggregator: Aggregator to use. A new one is created if omitted.
        """
        self._consolidate = consolidate
        self.aggregator = aggregator or Aggregator()
        self._reports: list[AggregateReport] = []
        if consolidate:
            self._reports.append(AggregateReport())
        self._finished = False

    @property
    def consolidate(self) -> bool:
        """Aggregation mode, fixed for the lifetime of the session."""
        return self._consolidate

    @property
    def reports(self) -> list[AggregateReport]:
        """Reports folded so far, in input order (not yet sorted)."""
        return list(self._reports)

    def add_text(self, text: str, source_name: Optional[str] = None) -> AggregateReport:
        """Parse one file's text and fold it into the session.

        Args:
            text: File contents.
            source_name: Name of the file, recorded on per-file reports.

        Returns:
            The report the text was folded into.

        Raises:
            ReportSortedError: If the session has already been finished.
        """
        if self._finished:
            raise ReportSortedError("Cannot add text to a finished session")

        records = parse_text(text, source_name)

        if self._consolidate:
            report = self._reports[0]
        else:
            report = AggregateReport(source_file=source_name)
            self._reports.append(report)

        return self.aggregator.fold(report, records)

    def finish(self) -> list[AggregateReport]:
        """Tally and sort every report. No more text can be added afterwards.

        Returns:
            Sorted reports: one in consolidated mode, one per file otherwise.
        """
        self._finished = True
        sorted_reports = []
        for report in self._reports:
            self.aggregator.tally(report)
            sorted_reports.append(self.aggregator.sort(report))
        return sorted_reports


def run(
    file_names: list[str],
    config: Config,
    sink: OutputSink,
    base_dir: Optional[Path] = None,
) -> list[AggregateReport] | None:
    """Parse the given files and render the final report.

    Files are processed strictly in the given order. A file that cannot be
    loaded is reported and skipped.

    Args:
        file_names: Source names, resolved through config.loading.
        config: Run configuration.
        sink: Output destination for progress and the report.
        base_dir: Directory for "local" loading. Defaults to the working directory.

    Returns:
        The sorted, unfiltered reports, or None when there were no files.
    """
    if not file_names:
        logger.warning("No files found")
        return None

    session = ParseSession(consolidate=config.parsing.consolidate)
    formatter = ReportFormatter(
        sink,
        filters=config.display.filters,
        log_list=config.display.log_list,
    )

    sink.header("Loading files", new_line=True)
    for name in file_names:
        try:
            source = load_source(name, config.loading, base_dir)
        except MissingSourceError as e:
            logger.error("%s", e)
            continue

        sink.header(f"Parsing text {source.name}", new_line=True)
        report = session.add_text(source.text, source.name)

        if config.parsing.summarize:
            session.aggregator.tally(report)
            formatter.render_summary(report)

    reports = session.finish()

    sink.print()
    sink.print("Processing finished.")

    if session.consolidate:
        formatter.render_report(reports[0])
    else:
        formatter.render_reports(reports)

    return reports
