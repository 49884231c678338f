"""Resolution and loading of log file sources.

A source is a file name as the user gave it (or as found in the configured
folder) together with its text content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from uelog.core.config import LoadingConfig

logger = logging.getLogger(__name__)


class MissingSourceError(Exception):
    """Raised when a log file cannot be found or read.

    Attributes:
        name: The source name as requested.
        path: The resolved path that was tried.
    """

    def __init__(self, name: str, path: Path, reason: str = "could not be found"):
        self.name = name
        self.path = path
        super().__init__(f"Path to file {name} ({path}) {reason}")


@dataclass
class LogSource:
    """A loaded log file.

    Attributes:
        name: Source name used in reports.
        path: Resolved file path.
        text: File contents decoded as UTF-8.
    """

    name: str
    path: Path
    text: str


def resolve_path(name: str, loading: LoadingConfig, base_dir: Path | None = None) -> Path:
    """Resolve a source name to a file path.

    Args:
        name: File name as given by the user or folder listing.
        loading: Loading settings ("local" or "folder" mode).
        base_dir: Directory for "local" mode. Defaults to the working directory.

    Returns:
        The path to read.
    """
    if loading.directory == "folder" and loading.folder_path:
        return Path(loading.folder_path) / name
    return (base_dir or Path.cwd()) / name


def list_folder(folder: Path) -> list[str]:
    """List the file names in a log folder, sorted by name.

    Args:
        folder: The folder to list.

    Returns:
        Names of regular files in the folder.

    Raises:
        NotADirectoryError: If the folder does not exist or is not a directory.
    """
    if not folder.is_dir():
        raise NotADirectoryError(f"Log folder not found: {folder}")
    logger.info("Opening folder: %s", folder)
    return sorted(entry.name for entry in folder.iterdir() if entry.is_file())


def load_source(name: str, loading: LoadingConfig, base_dir: Path | None = None) -> LogSource:
    """Read one source into memory.

    Undecodable bytes are replaced rather than rejected.

    Args:
        name: Source name.
        loading: Loading settings.
        base_dir: Directory for "local" mode.

    Returns:
        The loaded LogSource.

    Raises:
        MissingSourceError: If the file does not exist or cannot be read.
    """
    path = resolve_path(name, loading, base_dir)
    logger.info("Loading file %s...", path)

    if not path.is_file():
        raise MissingSourceError(name, path)

    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise MissingSourceError(name, path, f"could not be read: {e}") from e

    return LogSource(name=name, path=path, text=text)
