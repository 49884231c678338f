"""uelog - parse, deduplicate and summarize game engine log files."""

__version__ = "0.1.0"
