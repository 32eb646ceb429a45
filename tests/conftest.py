"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from testdir import TestRoot


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_slow = os.getenv("RUN_SLOW", "").lower() in {"1", "true", "yes"}
    for item in items:
        if "slow" in item.keywords and not run_slow:
            item.add_marker(pytest.mark.skip(reason="slow test"))


@pytest.fixture
def system_temp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the host temp directory at a per-test location."""
    temp = tmp_path / "system-temp"
    temp.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp))
    return temp


@pytest.fixture
def temp_root(system_temp: Path) -> Generator[TestRoot, None, None]:
    """Create an owning root under the per-test temp directory."""
    root = TestRoot.new_temporary()
    try:
        yield root
    finally:
        root.release()
