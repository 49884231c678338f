"""Shared pytest fixtures for uelog tests."""

import pytest
from pathlib import Path


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def sample_log(project_root):
    """Example engine log shipped with the repository."""
    return project_root / "examples/sample/UnrealGame.log"


@pytest.fixture
def small_log(tmp_path):
    """Minimal engine log for unit tests."""
    content = """\
LogTemp: Display: Hello world
LogTemp: Display: Hello world
LogCore: Warning: Init failed
Plain text line with no format
"""
    f = tmp_path / "small.log"
    f.write_text(content)
    return f


@pytest.fixture
def empty_log(tmp_path):
    """Empty log file."""
    f = tmp_path / "empty.log"
    f.write_text("")
    return f


@pytest.fixture
def large_log(tmp_path):
    """20k line log file with 100 distinct statements.

    Every line carries its own timestamp and frame prefix, as engine logs do.
    """
    f = tmp_path / "large.log"
    lines = [
        f"[2024.03.01-10.{i // 1000:02d}.{i % 60:02d}:{i % 1000:03d}][{i // 10:4d}]"
        f"LogTest: Display: Message number {i % 100}"
        for i in range(20000)
    ]
    f.write_text("\n".join(lines))
    return f


# Pytest markers
def pytest_configure(config):
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
