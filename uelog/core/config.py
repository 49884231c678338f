"""Configuration loading and parsing for uelog.

This module provides the ConfigLoader class for reading TOML configuration files
and the Config dataclass for storing configuration values.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import tomli
from pydantic import ValidationError

from uelog.models.filter_def import FieldFilter, FilterConfig
from uelog.utils.git import find_git_root

CONFIG_FILENAME = "uelog.toml"

DIRECTORY_MODES = ("local", "folder")


class ConfigError(Exception):
    """Exception raised for configuration parsing errors.

    Attributes:
        message: Error description
        line: Line number where error occurred (if available)
        path: Path to the config file (if available)
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        path: Optional[Path] = None
    ):
        self.line = line
        self.path = path

        parts = []
        if path:
            parts.append(f"Error in {path}")
        if line is not None:
            parts.append(f"at line {line}")
        if parts:
            full_message = f"{' '.join(parts)}: {message}"
        else:
            full_message = message

        super().__init__(full_message)


@dataclass
class LoadingConfig:
    """Where log files are read from.

    In "local" mode the files named on the command line are read relative to
    the working directory. In "folder" mode every file in folder_path is read.
    """

    directory: str = "local"
    folder_path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "LoadingConfig":
        """Create LoadingConfig from a dictionary."""
        directory = data.get("directory", "local")
        if directory not in DIRECTORY_MODES:
            raise ConfigError(
                f"Unknown loading.directory '{directory}', "
                f"expected one of: {', '.join(DIRECTORY_MODES)}"
            )
        return cls(
            directory=directory,
            folder_path=data.get("folder_path")
        )


@dataclass
class ParsingConfig:
    """Parsing settings."""

    consolidate: bool = True
    summarize: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "ParsingConfig":
        """Create ParsingConfig from a dictionary."""
        return cls(
            consolidate=data.get("consolidate", True),
            summarize=data.get("summarize", False)
        )


@dataclass
class OutputConfig:
    """Output configuration settings."""

    write_to_file: bool = False
    path: str = "uelog_output.txt"
    color: bool = True
    debug: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "OutputConfig":
        """Create OutputConfig from a dictionary."""
        return cls(
            write_to_file=data.get("write_to_file", False),
            path=data.get("path", "uelog_output.txt"),
            color=data.get("color", True),
            debug=data.get("debug", False)
        )


@dataclass
class DisplayConfig:
    """Report display settings.

    Attributes:
        log_list: Print the full entry list on the console.
        filters: Type and category filters applied to the report.
    """

    log_list: bool = True
    filters: FilterConfig = field(default_factory=FilterConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "DisplayConfig":
        """Create DisplayConfig from a dictionary.

        Raises:
            ConfigError: If a filter section holds invalid values.
        """
        filter_data = data.get("filters", {})
        try:
            filters = FilterConfig(
                type=FieldFilter(**filter_data.get("type", {})),
                category=FieldFilter(**filter_data.get("category", {})),
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid display.filters: {e}") from e

        return cls(
            log_list=data.get("log_list", True),
            filters=filters
        )


@dataclass
class Config:
    """Complete uelog configuration.

    Attributes:
        loading: Where to read log files from
        parsing: Consolidation and summary settings
        output: Report file, color and debug settings
        display: Entry list and filter settings
    """

    loading: LoadingConfig = field(default_factory=LoadingConfig)
    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create Config from a dictionary.

        Args:
            data: Dictionary parsed from TOML file

        Returns:
            Config instance with values from dictionary
        """
        return cls(
            loading=LoadingConfig.from_dict(data.get("loading", {})),
            parsing=ParsingConfig.from_dict(data.get("parsing", {})),
            output=OutputConfig.from_dict(data.get("output", {})),
            display=DisplayConfig.from_dict(data.get("display", {}))
        )


class ConfigLoader:
    """Loader for uelog TOML configuration files.

    Example usage:
        loader = ConfigLoader()
        config = loader.load(Path("uelog.toml"))

        # Or load defaults when no file exists
        config = loader.load(None)
    """

    def load(self, path: Optional[Path]) -> Config:
        """Load configuration from a TOML file.

        Args:
            path: Path to the TOML configuration file, or None to use defaults

        Returns:
            Config instance with values from file or defaults

        Raises:
            ConfigError: If the file exists but contains invalid TOML or values
            FileNotFoundError: If the path is specified but file doesn't exist
        """
        if path is None:
            return Config()

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        data = self._read(path)
        try:
            return Config.from_dict(data)
        except ConfigError as e:
            raise ConfigError(str(e), path=path) from e

    def _read(self, path: Path) -> dict:
        try:
            content = path.read_text(encoding="utf-8")
            return tomli.loads(content)
        except tomli.TOMLDecodeError as e:
            line = self._extract_line_number(str(e))
            raise ConfigError(str(e), line=line, path=path) from e

    def _extract_line_number(self, error_message: str) -> Optional[int]:
        """Extract line number from tomli error message.

        Args:
            error_message: The error message from tomli

        Returns:
            Line number if found, None otherwise
        """
        match = re.search(r"(?:at )?line (\d+)", error_message, re.IGNORECASE)
        if match:
            return int(match.group(1))
        return None

    def discover_configs(self, start_path: Optional[Path] = None) -> list[Path]:
        """Discover configuration files in order of precedence.

        Precedence order (lowest to highest):
        1. User config: ~/.config/uelog/config.toml
        2. Git root: <git_root>/uelog.toml
        3. Local (start_path): <start_path>/uelog.toml

        CLI arguments have highest precedence but are handled separately.

        Args:
            start_path: Starting directory for local config search. If None,
                uses current working directory.

        Returns:
            List of existing config file paths in precedence order (lowest first).
        """
        if start_path is None:
            start_path = Path.cwd()
        else:
            start_path = Path(start_path).resolve()

        configs: list[Path] = []

        user_config = Path(os.path.expanduser("~")) / ".config" / "uelog" / "config.toml"
        if user_config.exists():
            configs.append(user_config)

        git_root = find_git_root(start_path)
        if git_root:
            git_config = git_root / CONFIG_FILENAME
            if git_config.exists():
                if git_config.resolve() not in [c.resolve() for c in configs]:
                    configs.append(git_config)

        local_config = start_path / CONFIG_FILENAME
        if local_config.exists():
            if local_config.resolve() not in [c.resolve() for c in configs]:
                configs.append(local_config)

        return configs

    def load_merged(self, start_path: Optional[Path] = None) -> Config:
        """Load and merge configuration from all discovered config files.

        Later (higher precedence) files override values from earlier files.
        Unspecified values fall through from lower precedence configs or defaults.

        Args:
            start_path: Starting directory for config discovery. If None,
                uses current working directory.

        Returns:
            Config instance with merged values from all sources.

        Raises:
            ConfigError: If any config file contains invalid TOML or values.
        """
        merged_data: dict = {}

        for config_path in self.discover_configs(start_path):
            merged_data = self._deep_merge(merged_data, self._read(config_path))

        return Config.from_dict(merged_data)

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Deep merge two dictionaries.

        Nested dictionaries are merged recursively. Lists and other values
        are replaced entirely.

        Args:
            base: Base dictionary (lower precedence)
            override: Override dictionary (higher precedence)

        Returns:
            New dictionary with merged values.
        """
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
