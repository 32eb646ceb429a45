"""Fixture settings for temporary root naming and file writes."""

from __future__ import annotations

from dataclasses import dataclass
import os


_DEFAULT_PREFIX = "testdir-"
_DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class Settings:
    prefix: str = _DEFAULT_PREFIX
    chunk_size: int = _DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if not self.prefix:
            raise ValueError("Root name prefix must not be empty")
        if os.sep in self.prefix or (os.altsep and os.altsep in self.prefix) or "/" in self.prefix:
            raise ValueError(f"Root name prefix must not contain a path separator: {self.prefix!r}")
        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int):
            raise ValueError(f"Chunk size must be an integer: {self.chunk_size!r}")
        if self.chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive: {self.chunk_size}")

    def root_prefix(self) -> str:
        """Name prefix for a fabricated root, tagged with the current process id."""
        return f"{self.prefix}{os.getpid()}-"


def default_settings() -> Settings:
    return Settings()
