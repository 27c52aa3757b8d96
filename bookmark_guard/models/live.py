"""
Live tree models for Bookmark Guard.

These describe items as a tree provider reports them, and the change events a
provider emits.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class LiveNode(BaseModel):
    """
    One item of the mutable hierarchy, as reported by a tree provider.
    """

    id: str = Field(
        ...,
        description="Opaque provider id, stable across moves but not across delete+recreate"
    )

    parent_id: Optional[str] = Field(
        None,
        description="Id of the containing folder, None for the tree root"
    )

    kind: str = Field(
        ...,
        description="Provider item kind; usually folder, link or separator"
    )

    title: str = Field(
        default="",
        description="Display title"
    )

    url: Optional[str] = Field(
        None,
        description="Target URL for links"
    )

    index: int = Field(
        default=0,
        description="Position among siblings"
    )

    children: Optional[List['LiveNode']] = Field(
        None,
        description="Materialized children; only populated by get_tree()"
    )

    def match_key(self) -> Tuple[str, str]:
        return (self.title, self.url or "")


LiveNode.model_rebuild()


class TreeEventKind(str, Enum):
    """Mutation events a tree provider emits."""

    CREATED = "created"
    MOVED = "moved"
    CHANGED = "changed"
    REMOVED = "removed"


class TreeEvent(BaseModel):
    """
    A "something changed" notification.

    node_id is informational only; listeners must not rely on it.
    """

    kind: TreeEventKind
    node_id: Optional[str] = None
