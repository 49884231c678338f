"""Console and report-file output for uelog.

Everything uelog prints goes through an OutputSink, which writes to the
terminal console and, when enabled, to a plain-text report file. Log
diagnostics from the ``uelog`` logger are routed to the same places.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler

# Width of the report file; lines are never wrapped there
FILE_WIDTH = 160


class OutputSink:
    """Writes report text to the console and an optional file console.

    Attributes:
        console: Terminal console.
        file_console: Console bound to the report file, or None.
    """

    def __init__(self, console: Console, file_console: Optional[Console] = None):
        self.console = console
        self.file_console = file_console

    @property
    def consoles(self) -> list[Console]:
        """All active consoles, terminal first."""
        if self.file_console is None:
            return [self.console]
        return [self.console, self.file_console]

    def print(self, text: str = "", style: str | None = None, to_console: bool = True) -> None:
        """Print a line of text.

        Log content is printed with markup disabled since engine log lines
        are full of square brackets.

        Args:
            text: Text to print.
            style: Rich style for the terminal.
            to_console: When False, only the report file receives the text.
        """
        if to_console:
            self.console.print(text, style=style, markup=False, highlight=False)
        if self.file_console is not None:
            self.file_console.print(text, markup=False, highlight=False)

    def header(self, text: str, new_line: bool = False, to_console: bool = True) -> None:
        """Print a section header such as ``----- Log Data -----``."""
        if new_line:
            self.print(to_console=to_console)
        self.print(f"----- {text} -----", style="green", to_console=to_console)


def _attach_handlers(sink: OutputSink, debug: bool) -> list[logging.Handler]:
    package_logger = logging.getLogger("uelog")
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    handlers: list[logging.Handler] = []
    for console in sink.consoles:
        handler = RichHandler(
            console=console,
            show_time=False,
            show_path=False,
            markup=False,
        )
        package_logger.addHandler(handler)
        handlers.append(handler)
    return handlers


@contextmanager
def open_sink(
    console: Console,
    path: Optional[Path] = None,
    debug: bool = False,
) -> Iterator[OutputSink]:
    """Open the output sink for one run.

    The report file is opened before anything is printed and is flushed and
    closed when the block exits, including when it exits with an exception.
    The exception itself is not suppressed.

    Args:
        console: Terminal console.
        path: Report file to write, or None for console-only output.
        debug: Route DEBUG diagnostics as well as INFO and above.

    Yields:
        The OutputSink for the run.
    """
    handle = None
    file_console = None
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = path.open("w", encoding="utf-8")
        file_console = Console(
            file=handle,
            no_color=True,
            highlight=False,
            width=FILE_WIDTH,
            soft_wrap=True,
        )

    sink = OutputSink(console, file_console)
    package_logger = logging.getLogger("uelog")
    previous_level = package_logger.level
    handlers = _attach_handlers(sink, debug)
    try:
        yield sink
    finally:
        for handler in handlers:
            package_logger.removeHandler(handler)
        package_logger.setLevel(previous_level)
        if handle is not None:
            handle.flush()
            handle.close()
