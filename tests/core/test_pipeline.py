"""Tests for ParseSession and the run() orchestration."""

import io
import logging

import pytest
from rich.console import Console

from uelog.core.aggregation import ReportSortedError
from uelog.core.config import Config
from uelog.core.pipeline import ParseSession, run
from uelog.models.filter_def import FieldFilter
from uelog.utils.output import OutputSink

TEXT_A = (
    "LogTemp: Display: Hello world\n"
    "LogTemp: Display: Hello world\n"
    "LogCore: Warning: Init failed\n"
)
TEXT_B = (
    "LogCore: Warning: Init failed\n"
    "LogNet: Error: Timeout\n"
)


@pytest.fixture
def buffer_sink():
    """An OutputSink writing to an in-memory console."""
    buffer = io.StringIO()
    return OutputSink(Console(file=buffer, width=200, no_color=True)), buffer


@pytest.fixture
def log_dir(tmp_path):
    """Directory with two small logs."""
    (tmp_path / "a.log").write_text(TEXT_A)
    (tmp_path / "b.log").write_text(TEXT_B)
    return tmp_path


class TestParseSession:
    """Tests for ParseSession."""

    def test_consolidated(self):
        """Consolidated mode folds every file into one report."""
        session = ParseSession(consolidate=True)
        session.add_text(TEXT_A, "a.log")
        session.add_text(TEXT_B, "b.log")
        reports = session.finish()

        assert len(reports) == 1
        report = reports[0]
        assert report.total_count == 5
        assert report.unique_count == 3
        assert report.source_file is None
        assert report.type_counts["warnings"] == 1
        assert report.type_counts["errors"] == 1

    def test_per_file(self):
        """Per-file mode keeps one report per file, in input order."""
        session = ParseSession(consolidate=False)
        session.add_text(TEXT_A, "a.log")
        session.add_text(TEXT_B, "b.log")
        reports = session.finish()

        assert [r.source_file for r in reports] == ["a.log", "b.log"]
        assert [r.total_count for r in reports] == [3, 2]
        assert [r.unique_count for r in reports] == [2, 2]

    def test_reports_are_sorted(self):
        """finish() returns sorted reports."""
        session = ParseSession()
        session.add_text(TEXT_A)
        report = session.finish()[0]
        assert report.is_sorted
        assert [e.occurrence_count for e in report.unique_entries] == [1, 2]

    def test_mode_is_fixed(self):
        """The aggregation mode cannot be changed after construction."""
        session = ParseSession(consolidate=False)
        with pytest.raises(AttributeError):
            session.consolidate = True

    def test_no_text_after_finish(self):
        """A finished session rejects more text."""
        session = ParseSession()
        session.finish()
        with pytest.raises(ReportSortedError):
            session.add_text(TEXT_A)

    def test_timestamped_repeats_fold(self):
        """Repeats that differ only in their timestamp prefix form one entry."""
        text = "".join(
            f"[2024.03.01-10.15.42:12{n}][  {n}]LogTemp: Warning: Missing material\n"
            for n in range(3)
        )
        session = ParseSession(consolidate=True)
        session.add_text(text, "game.log")
        report = session.finish()[0]

        assert report.unique_count == 1
        assert report.unique_entries[0].occurrence_count == 3
        assert report.type_counts["warnings"] == 1

    def test_add_text_returns_report(self):
        """add_text returns the report the text was folded into."""
        session = ParseSession(consolidate=True)
        first = session.add_text(TEXT_A)
        second = session.add_text(TEXT_B)
        assert first is second
        assert session.reports == [first]

    def test_total_matches_lines(self):
        """total_count equals the number of extracted lines in both modes."""
        for consolidate in (True, False):
            session = ParseSession(consolidate=consolidate)
            session.add_text(TEXT_A + "noise\n", "a.log")
            session.add_text(TEXT_B, "b.log")
            assert sum(r.total_count for r in session.finish()) == 5


class TestRun:
    """Tests for run()."""

    def test_empty_file_list(self, buffer_sink, caplog):
        """No files is a warning, not an error."""
        sink, _ = buffer_sink
        with caplog.at_level(logging.WARNING, logger="uelog"):
            assert run([], Config(), sink) is None
        assert "No files found" in caplog.text

    def test_consolidated_run(self, buffer_sink, log_dir):
        """A consolidated run renders one Log Data section."""
        sink, buffer = buffer_sink
        reports = run(["a.log", "b.log"], Config(), sink, base_dir=log_dir)

        assert len(reports) == 1
        assert reports[0].total_count == 5
        output = buffer.getvalue()
        assert "----- Log Data -----" in output
        assert "Log Count: 5" in output
        assert "Unique Log Count: 3" in output
        assert "Processing finished." in output

    def test_per_file_run(self, buffer_sink, log_dir):
        """A per-file run renders a summary and a list per file."""
        sink, buffer = buffer_sink
        config = Config()
        config.parsing.consolidate = False
        reports = run(["b.log", "a.log"], config, sink, base_dir=log_dir)

        assert [r.source_file for r in reports] == ["b.log", "a.log"]
        output = buffer.getvalue()
        assert output.index("Log File Summary: b.log") < output.index("Log File Summary: a.log")
        assert output.index("Log File Summary: a.log") < output.index("Log List: b.log")
        assert "Log List: a.log" in output

    def test_missing_file_skipped(self, buffer_sink, log_dir, caplog):
        """A missing file is reported and the run continues."""
        sink, _ = buffer_sink
        with caplog.at_level(logging.INFO, logger="uelog"):
            reports = run(["a.log", "missing.log", "b.log"], Config(), sink, base_dir=log_dir)

        assert reports[0].total_count == 5
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "missing.log" in errors[0].getMessage()

    def test_summarize(self, buffer_sink, log_dir):
        """summarize prints a summary after each file."""
        sink, buffer = buffer_sink
        config = Config()
        config.parsing.summarize = True
        run(["a.log"], config, sink, base_dir=log_dir)

        output = buffer.getvalue()
        assert "2 unique entries ranging from counts of 2 to 1" in output
        assert "1 warnings" in output
        assert "Temp was logged to 1 times" in output

    def test_filters_applied(self, buffer_sink, log_dir):
        """Configured filters shape the rendered report, not the result."""
        sink, buffer = buffer_sink
        config = Config()
        config.display.filters.category = FieldFilter(blacklist=["Temp"])
        reports = run(["a.log"], config, sink, base_dir=log_dir)

        assert reports[0].total_count == 3
        output = buffer.getvalue()
        assert "Log Count: 1" in output
        assert "Hello world" not in output

    def test_unrecoverable_error_propagates(self, buffer_sink, log_dir, monkeypatch):
        """Unexpected errors escape run()."""
        sink, _ = buffer_sink

        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("uelog.core.pipeline.parse_text", explode)
        with pytest.raises(RuntimeError, match="boom"):
            run(["a.log"], Config(), sink, base_dir=log_dir)

    def test_empty_file(self, buffer_sink, empty_log):
        """An empty file gives an empty report, not an error."""
        sink, buffer = buffer_sink
        reports = run([empty_log.name], Config(), sink, base_dir=empty_log.parent)

        assert reports[0].total_count == 0
        assert reports[0].unique_entries == []
        assert "Log Count: 0" in buffer.getvalue()
