"""
Test root fixture: a directory tree built on demand and removed on release.

Usage:
    with TestRoot.new_temporary() as root:
        root.create("data/input.bin", RandomFile(1024)).create("out", Directory())
        assert root.path("data/input.bin").stat().st_size == 1024
    # The temporary root and everything under it are gone here
"""
from __future__ import annotations

import logging
import random
import shutil
import tempfile
import weakref
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from testdir.errors import UseAfterRelease, wrap_os_error
from testdir.models import (
    FILE_KINDS,
    Directory,
    EmptyFile,
    FileKind,
    FileSpec,
    RandomFile,
)
from testdir.paths import RelativePath, ensure_directory, ensure_parents, resolve
from testdir.settings import Settings, default_settings

logger = logging.getLogger(__name__)


def _remove_tree(root: Path) -> None:
    """Best-effort recursive delete; failures are logged, never raised."""
    try:
        shutil.rmtree(root)
    except FileNotFoundError:
        logger.debug("Fixture root %s was already gone at release", root)
    except OSError as exc:
        logger.warning("Failed to remove fixture root %s: %s", root, exc)
    else:
        logger.debug("Removed fixture root %s", root)


def _file_chunks(kind: FileKind, chunk_size: int) -> Iterator[bytes]:
    if isinstance(kind, EmptyFile):
        return
    remaining = kind.size
    while remaining > 0:
        length = min(chunk_size, remaining)
        if isinstance(kind, RandomFile):
            # Test payload only, not for secrets
            yield random.randbytes(length)
        else:
            yield bytes(length)
        remaining -= length


class TestRoot:
    """
    Root directory of a test fixture with a chainable creation API.

    Build one with ``new_temporary``, ``new_in``, ``new_in_current``,
    ``new_owned_at`` (owning: the root is deleted on release) or ``new_at``
    (caller-owned: the root is left in place). Release explicitly, through the
    context manager, or let the garbage-collection finalizer remove an owning
    root that was never released.
    """

    __test__ = False

    def __init__(
        self,
        root_path: Path,
        *,
        owns_root: bool,
        settings: Optional[Settings] = None,
        cleanup_path: Optional[Path] = None,
    ):
        self.root_path = Path(root_path)
        self.owns_root = owns_root
        self.settings = settings or default_settings()
        self.released = False

        self._files: list[Path] = []
        self._dirs: list[Path] = []

        # The finalizer must not hold a reference to self.
        self._finalizer: Optional[weakref.finalize] = None
        if owns_root:
            self.cleanup_path = Path(cleanup_path) if cleanup_path is not None else self.root_path
            self._finalizer = weakref.finalize(self, _remove_tree, self.cleanup_path)
        else:
            self.cleanup_path = None

    # Construction

    @classmethod
    def new_temporary(cls, settings: Optional[Settings] = None) -> TestRoot:
        """Create an owning root with a unique name under the host temp directory."""
        try:
            base = Path(tempfile.gettempdir())
        except OSError as exc:
            raise wrap_os_error("locate host temp directory", Path(exc.filename or "."), exc) from exc
        return cls._fabricate(base, settings)

    @classmethod
    def new_in(cls, base: Union[str, Path], settings: Optional[Settings] = None) -> TestRoot:
        """Create an owning root with a unique name under ``base``."""
        base_path = Path(base).absolute()
        ensure_directory(base_path)
        return cls._fabricate(base_path, settings)

    @classmethod
    def new_in_current(cls, settings: Optional[Settings] = None) -> TestRoot:
        """Create an owning root with a unique name in the current directory."""
        try:
            cwd = Path.cwd()
        except OSError as exc:
            raise wrap_os_error("read current directory", Path("."), exc) from exc
        return cls._fabricate(cwd, settings)

    @classmethod
    def new_at(cls, path: Union[str, Path], settings: Optional[Settings] = None) -> TestRoot:
        """
        Use ``path`` as a caller-owned root, creating it if absent.

        Release leaves the directory and its contents in place.

        Raises:
            IoFailure: if ``path`` exists as a non-directory or cannot be created.
        """
        root = Path(path).absolute()
        ensure_directory(root)
        logger.debug("Using caller-owned fixture root %s", root)
        return cls(root, owns_root=False, settings=settings)

    @classmethod
    def new_owned_at(cls, path: Union[str, Path], settings: Optional[Settings] = None) -> TestRoot:
        """
        Create an owning root at ``path``; relative paths are taken from the current directory.

        Release deletes the highest ancestor of ``path`` that did not exist
        before construction, or ``path`` itself when its parent already existed.
        Directories that existed beforehand above it are left in place.

        Raises:
            IoFailure: if ``path`` exists as a non-directory or cannot be created.
        """
        root = Path(path).absolute()
        cleanup = root
        for ancestor in root.parents:
            if ancestor.exists():
                break
            cleanup = ancestor
        ensure_directory(root)
        logger.debug("Created owned fixture root %s (cleanup from %s)", root, cleanup)
        return cls(root, owns_root=True, settings=settings, cleanup_path=cleanup)

    @classmethod
    def _fabricate(cls, base: Path, settings: Optional[Settings]) -> TestRoot:
        settings = settings or default_settings()
        try:
            # mkdtemp creates the directory exclusively
            created = tempfile.mkdtemp(prefix=settings.root_prefix(), dir=base)
        except OSError as exc:
            raise wrap_os_error("create temporary root in", base, exc) from exc
        root = Path(created).absolute()
        logger.debug("Created fixture root %s", root)
        return cls(root, owns_root=True, settings=settings)

    # Context management

    def __enter__(self) -> TestRoot:
        self._check_active("enter")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.release()
        return False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(root_path={str(self.root_path)!r}, "
            f"owns_root={self.owns_root}, released={self.released})"
        )

    # Inspection

    @property
    def root(self) -> Path:
        return self.root_path

    @property
    def files(self) -> tuple[Path, ...]:
        """Files created through this fixture, in creation order."""
        return tuple(self._files)

    @property
    def dirs(self) -> tuple[Path, ...]:
        """Directories created through this fixture, in creation order.

        Only paths passed to ``create`` with ``Directory()`` are listed; parent
        directories made along the way for a file or directory are not.
        """
        return tuple(self._dirs)

    def path(self, relative_path: RelativePath) -> Path:
        """Resolve ``relative_path`` under the root without touching the filesystem."""
        self._check_active("resolve path")
        return resolve(self.root_path, relative_path)

    # Building

    def create(self, relative_path: RelativePath, kind: FileKind) -> TestRoot:
        """
        Materialize ``kind`` at ``relative_path``, creating parent directories.

        Args:
            relative_path: Slash-separated path under the root
            kind: One of Directory, EmptyFile, ZeroFilledFile, RandomFile

        Returns:
            This fixture, so calls can be chained

        Raises:
            InvalidPath: if the path is empty, absolute, or uses ``.``/``..``
            IoFailure: if any filesystem call fails; earlier entries are kept
        """
        self._check_active("create entries")
        if not isinstance(kind, FILE_KINDS):
            raise TypeError(f"Unsupported file kind: {kind!r}")

        target = resolve(self.root_path, relative_path)
        ensure_parents(target)

        if isinstance(kind, Directory):
            ensure_directory(target)
            self._remember(self._dirs, target)
        else:
            self._write_file(target, kind)
            self._remember(self._files, target)

        logger.debug("Materialized %r at %s", kind, target)
        return self

    def create_all(self, specs: Iterable[Union[FileSpec, tuple[RelativePath, FileKind]]]) -> TestRoot:
        """Apply each spec in order; stops at the first failure."""
        for spec in specs:
            if isinstance(spec, FileSpec):
                self.create(spec.path, spec.kind)
            else:
                relative_path, kind = spec
                self.create(relative_path, kind)
        return self

    def remove(self, relative_path: RelativePath) -> TestRoot:
        """Delete a file or a directory subtree under the root; missing entries are ignored."""
        self._check_active("remove entries")
        target = resolve(self.root_path, relative_path)
        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            elif target.exists() or target.is_symlink():
                target.unlink()
            else:
                logger.debug("Nothing to remove at %s", target)
                return self
        except OSError as exc:
            raise wrap_os_error("remove", target, exc) from exc

        self._files = [path for path in self._files if not _is_within(path, target)]
        self._dirs = [path for path in self._dirs if not _is_within(path, target)]
        logger.debug("Removed %s", target)
        return self

    # Release

    def release(self) -> None:
        """
        End the fixture's lifetime.

        An owning root is deleted recursively; deletion failures are logged
        rather than raised so teardown never masks a test outcome. A
        caller-owned root is left untouched. Calling release again is a no-op.
        """
        if self.released:
            return
        self.released = True
        if self._finalizer is not None:
            self._finalizer()
        else:
            logger.debug("Released caller-owned fixture root %s (left in place)", self.root_path)

    # Helpers

    def _check_active(self, operation: str) -> None:
        if self.released:
            raise UseAfterRelease(self.root_path, operation)

    def _write_file(self, target: Path, kind: FileKind) -> None:
        try:
            with open(target, "wb") as handle:
                for chunk in _file_chunks(kind, self.settings.chunk_size):
                    handle.write(chunk)
        except OSError as exc:
            raise wrap_os_error(f"write {type(kind).__name__}", target, exc) from exc

    @staticmethod
    def _remember(entries: list[Path], target: Path) -> None:
        if target not in entries:
            entries.append(target)


def _is_within(path: Path, ancestor: Path) -> bool:
    return path == ancestor or ancestor in path.parents
