"""
Canonical data models for Bookmark Guard.

This module defines the snapshot-comparable form that every live bookmark tree
is reduced to before it is persisted, and that the reconciler restores from.
"""

from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import MalformedSnapshotError


class NodeKind(str, Enum):
    """The three item kinds a bookmark hierarchy is made of."""

    FOLDER = "folder"
    LINK = "link"
    SEPARATOR = "separator"


class CanonicalNode(BaseModel):
    """
    One item of a captured bookmark tree.

    Only the structural fields that reconciliation compares are kept; ids,
    timestamps and other provider metadata are dropped.
    """

    model_config = ConfigDict(frozen=True)

    kind: NodeKind = Field(
        ...,
        description="Item kind: folder, link or separator"
    )

    title: str = Field(
        default="",
        description="Display title, empty string when the provider reports none"
    )

    url: str = Field(
        default="",
        description="Target URL for links, empty for every other kind"
    )

    children: Tuple['CanonicalNode', ...] = Field(
        default_factory=tuple,
        description="Ordered child items; only folders have any"
    )

    @property
    def is_folder(self) -> bool:
        return self.kind == NodeKind.FOLDER

    def match_key(self) -> Tuple[str, str]:
        """The (title, url) pair used to pair this node with a live item."""
        return (self.title, self.url or "")


# Enable forward references for self-referencing model
CanonicalNode.model_rebuild()


class Snapshot(BaseModel):
    """
    The authoritative layout: one ordered node sequence per top-level root.

    Snapshots are replaced wholesale and never patched.
    """

    model_config = ConfigDict(frozen=True)

    roots: Dict[str, Tuple[CanonicalNode, ...]] = Field(
        default_factory=dict,
        description="Root identifier -> ordered children captured under that root"
    )

    def to_mapping(self) -> Dict[str, List[Dict[str, Any]]]:
        """Plain JSON-compatible mapping used as the persisted snapshot value."""
        return {
            root_id: [node.model_dump(mode="json") for node in nodes]
            for root_id, nodes in self.roots.items()
        }

    @staticmethod
    def parse_root(root_id: str, raw_nodes: Any) -> Tuple[CanonicalNode, ...]:
        """
        Validate one persisted root entry.

        Raises:
            MalformedSnapshotError: If the entry is not a list of valid nodes
        """
        if not isinstance(raw_nodes, list):
            raise MalformedSnapshotError(root_id, f"expected a list, got {type(raw_nodes).__name__}")
        try:
            return tuple(CanonicalNode.model_validate(raw) for raw in raw_nodes)
        except ValidationError as e:
            raise MalformedSnapshotError(root_id, str(e)) from e

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "Snapshot":
        """Build a snapshot from its persisted mapping, validating every root."""
        return cls(roots={
            root_id: cls.parse_root(root_id, raw_nodes)
            for root_id, raw_nodes in data.items()
        })
