"""
In-memory tree provider for Bookmark Guard.

This module keeps a complete bookmark hierarchy in process memory. It backs the
test-suite and embedding hosts, and is the base for file-backed providers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..errors import ProviderOperationError
from ..models import CanonicalNode, LiveNode, NodeKind, TreeEventKind
from .base import BaseTreeProvider

TREE_ROOT_ID = "root________"

DEFAULT_ROOTS: List[Tuple[str, str]] = [
    ("menu________", "Bookmarks Menu"),
    ("toolbar_____", "Bookmarks Toolbar"),
    ("unfiled_____", "Other Bookmarks"),
    ("mobile______", "Mobile Bookmarks"),
]


@dataclass
class _Record:
    id: str
    parent_id: Optional[str]
    kind: str
    title: str = ""
    url: Optional[str] = None
    children: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)


class InMemoryTreeProvider(BaseTreeProvider):
    """
    Tree provider holding every item in a dict of records.

    Move semantics: move(id, index) leaves the item at exactly `index` among
    its siblings (clamped to the last position).
    """

    def __init__(self, roots: Optional[List[Tuple[str, str]]] = None, tree_root_id: str = TREE_ROOT_ID):
        """
        Initialize the provider with empty top-level roots.

        Args:
            roots: (id, title) pairs for the top-level roots, in display order
            tree_root_id: Id of the invisible node holding the top-level roots
        """
        super().__init__()
        self.tree_root_id = tree_root_id
        self._nodes: Dict[str, _Record] = {}
        self._next_id = 1
        self.operations: List[Tuple[Any, ...]] = []
        self._reset(roots if roots is not None else DEFAULT_ROOTS)

    def _reset(self, roots: List[Tuple[str, str]]) -> None:
        self._nodes = {self.tree_root_id: _Record(id=self.tree_root_id, parent_id=None, kind=NodeKind.FOLDER.value)}
        for root_id, title in roots:
            self._nodes[root_id] = _Record(id=root_id, parent_id=self.tree_root_id,
                                           kind=NodeKind.FOLDER.value, title=title)
            self._nodes[self.tree_root_id].children.append(root_id)

    @property
    def root_ids(self) -> List[str]:
        return list(self._nodes[self.tree_root_id].children)

    # Reads

    async def get_tree(self) -> LiveNode:
        return self._materialize(self._nodes[self.tree_root_id], 0)

    async def get_children(self, node_id: str) -> List[LiveNode]:
        record = self._require(node_id)
        return [self._to_live(self._nodes[child_id], index)
                for index, child_id in enumerate(record.children)]

    # Writes

    async def create(self, parent_id: str, index: Optional[int], title: str,
                     url: Optional[str] = None, kind: Optional[str] = None) -> LiveNode:
        parent = self._require(parent_id)
        if parent.id == self.tree_root_id:
            raise ProviderOperationError("Cannot create items next to the top-level roots")
        if parent.kind != NodeKind.FOLDER.value:
            raise ProviderOperationError(f"Parent {parent_id} is not a folder")

        kind = self._resolve_kind(kind, url)
        record = _Record(
            id=self._allocate_id(),
            parent_id=parent_id,
            kind=kind,
            title=title or "",
            url=url if kind == NodeKind.LINK.value else None,
        )
        self._check_create(record)

        position = len(parent.children) if index is None else max(0, min(index, len(parent.children)))
        self._nodes[record.id] = record
        parent.children.insert(position, record.id)
        self.operations.append(("create", record.id, parent_id, position))

        await self._committed(TreeEventKind.CREATED, record.id)
        return self._to_live(record, position)

    async def move(self, node_id: str, index: int) -> None:
        record = self._require_movable(node_id)
        siblings = self._nodes[record.parent_id].children
        siblings.remove(node_id)
        position = max(0, min(index, len(siblings)))
        siblings.insert(position, node_id)
        self.operations.append(("move", node_id, position))

        await self._committed(TreeEventKind.MOVED, node_id)

    async def remove_tree(self, node_id: str) -> None:
        record = self._require_movable(node_id)
        self._nodes[record.parent_id].children.remove(node_id)
        stack = [node_id]
        while stack:
            removed = self._nodes.pop(stack.pop())
            stack.extend(removed.children)
        self.operations.append(("remove", node_id))

        await self._committed(TreeEventKind.REMOVED, node_id)

    async def update(self, node_id: str, title: Optional[str] = None, url: Optional[str] = None) -> None:
        """Change an item's title and/or url, the way a user edit would."""
        record = self._require_movable(node_id)
        if title is not None:
            record.title = title
        if url is not None and record.kind == NodeKind.LINK.value:
            record.url = url
        self.operations.append(("update", node_id))

        await self._committed(TreeEventKind.CHANGED, node_id)

    def seed(self, parent_id: str, nodes: Iterable[CanonicalNode]) -> List[str]:
        """
        Append a canonical structure under parent_id without emitting events.

        Returns:
            Ids of the items created directly under parent_id
        """
        created: List[str] = []
        stack = [(parent_id, node, created) for node in reversed(list(nodes))]
        while stack:
            target, node, sink = stack.pop()
            record = _Record(id=self._allocate_id(), parent_id=target, kind=node.kind.value,
                             title=node.title, url=node.url if node.kind == NodeKind.LINK else None)
            self._nodes[record.id] = record
            self._nodes[target].children.append(record.id)
            sink.append(record.id)
            stack.extend((record.id, child, []) for child in reversed(node.children))
        return created

    # Internals

    async def _committed(self, kind: TreeEventKind, node_id: str) -> None:
        self._persist()
        await self.emit(kind, node_id)

    def _persist(self) -> None:
        """Hook for subclasses that mirror the tree to durable storage."""

    def _check_create(self, record: _Record) -> None:
        """Hook for subclasses that cannot store every item kind."""

    def _allocate_id(self) -> str:
        while str(self._next_id) in self._nodes:
            self._next_id += 1
        node_id = str(self._next_id)
        self._next_id += 1
        return node_id

    @staticmethod
    def _resolve_kind(kind: Optional[str], url: Optional[str]) -> str:
        if kind:
            try:
                return NodeKind(kind).value
            except ValueError:
                raise ProviderOperationError(f"Unsupported item kind: {kind}") from None
        return NodeKind.LINK.value if url else NodeKind.FOLDER.value

    def _require(self, node_id: str) -> _Record:
        record = self._nodes.get(node_id)
        if record is None:
            raise ProviderOperationError(f"No bookmark item with id {node_id}")
        return record

    def _require_movable(self, node_id: str) -> _Record:
        record = self._require(node_id)
        if record.parent_id is None or record.parent_id == self.tree_root_id:
            raise ProviderOperationError(f"Item {node_id} is a root and cannot be modified")
        return record

    def _to_live(self, record: _Record, index: int) -> LiveNode:
        return LiveNode(id=record.id, parent_id=record.parent_id, kind=record.kind,
                        title=record.title, url=record.url, index=index)

    def _materialize(self, record: _Record, index: int) -> LiveNode:
        node = self._to_live(record, index)
        if record.kind == NodeKind.FOLDER.value:
            node.children = [self._materialize(self._nodes[child_id], i)
                             for i, child_id in enumerate(record.children)]
        return node
