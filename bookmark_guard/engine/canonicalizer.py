"""
Snapshot capture for Bookmark Guard.

Reduces a live hierarchy to canonical nodes: kind, title, url and ordered
children. Provider metadata (ids, dates, positions) is dropped.
"""

from typing import Dict, Tuple

from ..models import CanonicalNode, LiveNode, NodeKind, Snapshot
from ..providers import BaseTreeProvider

# Provider-specific spellings of the link kind
_KIND_ALIASES: Dict[str, NodeKind] = {
    "bookmark": NodeKind.LINK,
    "url": NodeKind.LINK,
}


def coerce_kind(node: LiveNode) -> NodeKind:
    """
    Map a provider kind onto folder/link/separator.

    Unknown kinds are guessed from shape: anything with children is a folder,
    anything with a url is a link, the rest are separators.
    """
    try:
        return NodeKind(node.kind)
    except ValueError:
        pass
    if node.kind in _KIND_ALIASES:
        return _KIND_ALIASES[node.kind]
    if node.children is not None:
        return NodeKind.FOLDER
    if node.url:
        return NodeKind.LINK
    return NodeKind.SEPARATOR


def canonicalize_node(node: LiveNode) -> CanonicalNode:
    kind = coerce_kind(node)
    children: Tuple[CanonicalNode, ...] = ()
    if kind == NodeKind.FOLDER and node.children:
        children = tuple(canonicalize_node(child) for child in node.children)
    return CanonicalNode(
        kind=kind,
        title=node.title or "",
        url=(node.url or "") if kind == NodeKind.LINK else "",
        children=children,
    )


def canonicalize(tree: LiveNode) -> Snapshot:
    """
    Capture every top-level root of a materialized tree.

    Args:
        tree: The invisible tree root returned by a provider's get_tree()

    Returns:
        Snapshot keyed by top-level root id
    """
    return Snapshot(roots={
        root.id: tuple(canonicalize_node(child) for child in root.children or [])
        for root in tree.children or []
    })


async def capture_snapshot(provider: BaseTreeProvider) -> Snapshot:
    """Read the provider's whole tree and canonicalize it."""
    return canonicalize(await provider.get_tree())
