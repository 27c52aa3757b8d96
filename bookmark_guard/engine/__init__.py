"""Snapshot capture and reconciliation engine."""

from .canonicalizer import canonicalize, canonicalize_node, capture_snapshot, coerce_kind
from .reconciler import TreeReconciler
from .orchestrator import ReconciliationOrchestrator

__all__ = [
    "canonicalize",
    "canonicalize_node",
    "capture_snapshot",
    "coerce_kind",
    "TreeReconciler",
    "ReconciliationOrchestrator"
]
