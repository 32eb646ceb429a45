"""pytest fixtures for test directory trees.

Registered through the ``pytest11`` entry point, so installing the package
makes ``testdir_root`` and ``testdir_factory`` available to every test.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator, Optional, Union

import pytest

from testdir.builder import TestRoot


@pytest.fixture
def testdir_root() -> Generator[TestRoot, None, None]:
    """An owning temporary root, removed when the test finishes."""
    with TestRoot.new_temporary() as root:
        yield root


@pytest.fixture
def testdir_factory() -> Generator[Callable[..., TestRoot], None, None]:
    """Factory for extra roots; every root it hands out is released at teardown.

    Usage:
        root = testdir_factory()            # owning temporary root
        kept = testdir_factory(some_path)   # caller-owned root, left in place
    """
    roots: list[TestRoot] = []

    def _create(path: Optional[Union[str, Path]] = None) -> TestRoot:
        root = TestRoot.new_temporary() if path is None else TestRoot.new_at(path)
        roots.append(root)
        return root

    yield _create

    for root in reversed(roots):
        root.release()
