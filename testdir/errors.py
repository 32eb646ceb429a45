"""Error taxonomy for fixture setup and teardown."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class TestDirError(Exception):
    """Base error for test directory fixtures."""

    # Keep pytest from collecting the exception hierarchy as test classes.
    __test__ = False


class IoFailure(TestDirError, OSError):
    """Filesystem failure while building or inspecting a fixture tree."""

    def __init__(self, operation: str, path: Path, cause: Optional[OSError] = None):
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        reason = cause.strerror or str(cause) if cause is not None else "failed"
        self.message = f"{operation} {self.path}: {reason}"
        if cause is not None and cause.errno is not None:
            OSError.__init__(self, cause.errno, self.message)
        else:
            OSError.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


class InvalidPath(TestDirError, ValueError):
    """Relative path argument is empty or structurally unusable."""

    def __init__(self, path: object, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid fixture path {path!r}: {reason}")


class UseAfterRelease(TestDirError, RuntimeError):
    """Operation attempted on a fixture that was already released."""

    def __init__(self, root: Path, operation: str):
        self.root = root
        self.operation = operation
        super().__init__(f"Cannot {operation}: fixture at {root} was released")


def wrap_os_error(operation: str, path: Path, exc: OSError) -> IoFailure:
    """Wrap an OSError, leaving existing IoFailure instances untouched."""
    if isinstance(exc, IoFailure):
        return exc
    return IoFailure(operation, path, exc)
