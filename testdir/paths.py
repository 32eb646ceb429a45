"""Resolution of slash-separated fixture paths against a root directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath
from typing import Union

from testdir.errors import InvalidPath, wrap_os_error

logger = logging.getLogger(__name__)

RelativePath = Union[str, PurePath]

_REJECTED_SEGMENTS = {".", ".."}


def split_relative(relative_path: RelativePath) -> tuple[str, ...]:
    """Split a relative fixture path into validated name segments.

    ``/`` is the logical separator regardless of the host; empty segments from
    repeated or trailing slashes are dropped. ``.`` and ``..`` segments are
    rejected rather than resolved, so every result stays under the root.

    Raises:
        InvalidPath: if the path is empty, absolute, anchored to a drive, or
            contains ``.``/``..`` or host separator characters inside a segment.
    """
    if isinstance(relative_path, PurePath):
        if relative_path.anchor:
            raise InvalidPath(relative_path, "absolute paths are not allowed")
        raw_segments = list(relative_path.parts)
    elif isinstance(relative_path, str):
        if relative_path.startswith("/") or PurePath(relative_path).anchor:
            raise InvalidPath(relative_path, "absolute paths are not allowed")
        raw_segments = relative_path.split("/")
    else:
        raise InvalidPath(relative_path, "expected a str or PurePath")

    segments = tuple(segment for segment in raw_segments if segment)
    if not segments:
        raise InvalidPath(relative_path, "path is empty")

    for segment in segments:
        if segment in _REJECTED_SEGMENTS:
            raise InvalidPath(relative_path, f"{segment!r} segments are not allowed")
        if "\0" in segment:
            raise InvalidPath(relative_path, "NUL characters are not allowed")
        if os.sep in segment or (os.altsep and os.altsep in segment):
            raise InvalidPath(relative_path, f"segment {segment!r} contains a host path separator")
    return segments


def resolve(root: Path, relative_path: RelativePath) -> Path:
    """Join ``root`` with the segments of ``relative_path``.

    Pure: touches nothing on disk.
    """
    return Path(root).joinpath(*split_relative(relative_path))


def ensure_parents(absolute_path: Path) -> None:
    """Create every missing ancestor directory of ``absolute_path``."""
    parent = Path(absolute_path).parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise wrap_os_error("create parent directories of", absolute_path, exc) from exc


def ensure_directory(path: Path) -> None:
    """Create ``path`` and its ancestors; an existing directory is fine."""
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise wrap_os_error("create directory", path, exc) from exc
    logger.debug("Ensured directory %s", path)
