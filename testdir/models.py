"""File kinds and specs materialized by a test root."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Union


def _check_size(size: object) -> None:
    if isinstance(size, bool) or not isinstance(size, int):
        raise ValueError(f"File size must be an integer: {size!r}")
    if size < 0:
        raise ValueError(f"File size must not be negative: {size}")


@dataclass(frozen=True)
class Directory:
    """A directory; creating an existing directory is a no-op."""


@dataclass(frozen=True)
class EmptyFile:
    """A zero-length regular file, truncating any existing file."""


@dataclass(frozen=True)
class ZeroFilledFile:
    """A regular file of ``size`` zero bytes."""
    size: int

    def __post_init__(self) -> None:
        _check_size(self.size)


@dataclass(frozen=True)
class RandomFile:
    """A regular file of ``size`` bytes of non-cryptographic random content."""
    size: int

    def __post_init__(self) -> None:
        _check_size(self.size)


FileKind = Union[Directory, EmptyFile, ZeroFilledFile, RandomFile]

FILE_KINDS: tuple[type, ...] = (Directory, EmptyFile, ZeroFilledFile, RandomFile)


@dataclass(frozen=True)
class FileSpec:
    """A relative path paired with the kind of entry to create there."""
    path: Union[str, PurePath]
    kind: FileKind

    def __post_init__(self) -> None:
        if not isinstance(self.kind, FILE_KINDS):
            raise TypeError(f"Unsupported file kind: {self.kind!r}")
