"""Log line extraction and decomposition.

Engine logs are plain text where each statement looks like::

    [2024.03.01-10.15.42:123][  0]LogTemp: Warning: Something happened

The extractor pulls candidate lines out of a text blob and the decomposer
splits each one into category, severity type and message.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from uelog.models.record import LogRecord

logger = logging.getLogger(__name__)

# Candidate line: optional [token][token] prefix, then "Log", then a colon.
# Only the text from the Log marker onward is captured.
_LINE_PATTERN = re.compile(
    r"^(?:\[[^\[\]\r\n]*\]\[[^\[\]\r\n]*\][ \t]*)?(Log[^\r\n]*:[^\r\n]*)",
    re.MULTILINE,
)

# LogCategory: [Type:] message
_DECOMPOSE_PATTERN = re.compile(
    r"Log(?P<category>[^:]+):\s*"
    r"(?:(?P<type>[^:\-\s]*):(?!:)\s*)?"
    r"(?P<message>.*)"
)

_VALID_TYPE_PATTERN = re.compile(r"^[A-Za-z0-9_\s]*$")


def extract_lines(text: str) -> list[str]:
    """Find every candidate log statement in a block of text.

    Args:
        text: Raw file contents.

    Returns:
        Matched statements in file order, each starting at the Log marker.
        A leading [token][token] prefix is not part of the result. Empty if
        nothing matched.
    """
    return _LINE_PATTERN.findall(text)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _missing_fields(record: LogRecord) -> str | None:
    if record.category is None and record.message is None:
        return "Category and Message"
    if record.category is None:
        return "Category"
    if record.message is None:
        return "Message"
    return None


def decompose_line(line: str) -> LogRecord:
    """Split a candidate line into category, type and message.

    Lines that do not match the full pattern are kept as unparsed records
    with every field absent, so the total line count stays exact.

    Args:
        line: A single line returned by extract_lines().

    Returns:
        A LogRecord with occurrence count 1.
    """
    match = _DECOMPOSE_PATTERN.search(line)
    if match is None:
        record = LogRecord(raw_text=line)
    else:
        record = LogRecord(
            category=_clean(match.group("category")),
            severity_type=_clean(match.group("type")),
            message=_clean(match.group("message")),
            raw_text=line,
        )

    missing = _missing_fields(record)
    if missing:
        logger.warning("Match has missing fields %s: %s", missing, line)

    if record.severity_type and not _VALID_TYPE_PATTERN.match(record.severity_type):
        logger.error("Invalid type of %s on log: %s", record.severity_type, line)

    return record


def parse_text(text: str, source_name: str | None = None) -> list[LogRecord]:
    """Extract and decompose every log statement in a text blob.

    Args:
        text: Raw file contents.
        source_name: Optional name used in progress output.

    Returns:
        One LogRecord per extracted line, in file order.
    """
    records = [decompose_line(line) for line in extract_lines(text)]
    logger.info(
        "%s of %d characters was parsed into %d log statements",
        source_name or "Text",
        len(text),
        len(records),
    )
    return records
