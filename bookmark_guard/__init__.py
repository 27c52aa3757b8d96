"""
Bookmark Guard: keeps a bookmark hierarchy locked to a captured layout.

Captures the bookmark tree into a canonical snapshot and reverts any later
change by reconciling the live tree back against it.
"""

__version__ = "0.1.0"
__author__ = "Bookmark Guard Project"

# Import main components
from .models import CanonicalNode, NodeKind, Snapshot, LiveNode, LockState, ReconciliationReport
from .providers import BaseTreeProvider, InMemoryTreeProvider, ChromiumBookmarksProvider
from .storage import BaseStore, StorageManager
from .engine import canonicalize, TreeReconciler, ReconciliationOrchestrator
from .channel import CommandChannel
from .service import GuardService

__all__ = [
    "CanonicalNode",
    "NodeKind",
    "Snapshot",
    "LiveNode",
    "LockState",
    "ReconciliationReport",
    "BaseTreeProvider",
    "InMemoryTreeProvider",
    "ChromiumBookmarksProvider",
    "BaseStore",
    "StorageManager",
    "canonicalize",
    "TreeReconciler",
    "ReconciliationOrchestrator",
    "CommandChannel",
    "GuardService"
]
