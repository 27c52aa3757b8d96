"""
Lock and reconciliation state models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class GuardState(str, Enum):
    """Whether the orchestrator is currently running a reconciliation pass."""

    IDLE = "idle"
    RECONCILING = "reconciling"


class LockState(BaseModel):
    """The persisted protection flag, as returned to the toggle surface."""

    locked: bool = Field(
        default=False,
        description="True while the snapshot is being enforced"
    )


@dataclass
class ReconciliationReport:
    """
    Counts of corrective operations applied during one reconciliation pass.
    """
    creates: int = 0
    moves: int = 0
    deletes: int = 0
    roots: List[str] = field(default_factory=list)
    failed_roots: List[str] = field(default_factory=list)

    @property
    def operations(self) -> int:
        return self.creates + self.moves + self.deletes
