"""Test helper utilities."""

from .fs import assert_all_zero, tree_listing

__all__ = [
    "assert_all_zero",
    "tree_listing",
]
