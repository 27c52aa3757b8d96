"""Data models for Bookmark Guard."""

from .canonical import CanonicalNode, NodeKind, Snapshot
from .live import LiveNode, TreeEvent, TreeEventKind
from .state import GuardState, LockState, ReconciliationReport

__all__ = [
    "CanonicalNode",
    "NodeKind",
    "Snapshot",
    "LiveNode",
    "TreeEvent",
    "TreeEventKind",
    "GuardState",
    "LockState",
    "ReconciliationReport"
]
