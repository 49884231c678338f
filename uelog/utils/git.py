"""Git repository utilities for uelog.

Used by config discovery to find a project-level uelog.toml.
"""

import os
from pathlib import Path
from typing import Optional


def find_git_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """Find the root directory of a git repository.

    Walks up from the start path (or current working directory) looking for
    a .git entry. The UELOG_GIT_ROOT environment variable overrides detection.

    Args:
        start_path: Directory to start searching from. If None, uses the
            current working directory.

    Returns:
        Path to the git root directory, or None if not in a git repository.
    """
    env_override = os.environ.get("UELOG_GIT_ROOT")
    if env_override:
        # Returned even if missing; callers check for the config file itself
        return Path(env_override)

    if start_path is None:
        current = Path.cwd()
    else:
        current = Path(start_path).resolve()

    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate

    return None
