"""Live bookmark tree providers."""

from .base import BaseTreeProvider, TreeListener
from .memory import InMemoryTreeProvider, TREE_ROOT_ID, DEFAULT_ROOTS
from .chromium import ChromiumBookmarksProvider

__all__ = [
    "BaseTreeProvider",
    "TreeListener",
    "InMemoryTreeProvider",
    "TREE_ROOT_ID",
    "DEFAULT_ROOTS",
    "ChromiumBookmarksProvider"
]
