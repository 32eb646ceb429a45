"""Temporary directory trees for tests, built on demand and removed on release."""

from .builder import TestRoot
from .errors import InvalidPath, IoFailure, TestDirError, UseAfterRelease
from .models import Directory, EmptyFile, FileKind, FileSpec, RandomFile, ZeroFilledFile
from .settings import Settings, default_settings

__all__ = [
    "TestRoot",
    "TestDirError",
    "IoFailure",
    "InvalidPath",
    "UseAfterRelease",
    "FileKind",
    "FileSpec",
    "Directory",
    "EmptyFile",
    "ZeroFilledFile",
    "RandomFile",
    "Settings",
    "default_settings",
]

__version__ = "0.1.0"
