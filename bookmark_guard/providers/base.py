"""
Base tree provider interface for Bookmark Guard.

This module defines the abstract interface that every live bookmark store must
implement, plus the listener plumbing used to deliver change events.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, Set

from ..models import LiveNode, TreeEvent, TreeEventKind

TreeListener = Callable[[TreeEvent], Awaitable[None]]


class BaseTreeProvider(ABC):
    """
    Abstract base class for live bookmark tree providers.

    Implementations raise ProviderOperationError for any failed operation.
    Events are delivered asynchronously: emit() schedules every listener as a
    task and yields once, so listeners run while the caller is still suspended
    inside its mutating operation.
    """

    def __init__(self):
        self._listeners: List[TreeListener] = []
        self._pending: Set[asyncio.Future] = set()

    @abstractmethod
    async def get_tree(self) -> LiveNode:
        """
        Return the whole hierarchy with children materialized.

        The returned node is the invisible tree root; its children are the
        top-level roots (toolbar, menu, ...).
        """
        pass

    @abstractmethod
    async def get_children(self, node_id: str) -> List[LiveNode]:
        """Return the ordered children of node_id."""
        pass

    @abstractmethod
    async def create(self, parent_id: str, index: Optional[int], title: str,
                     url: Optional[str] = None, kind: Optional[str] = None) -> LiveNode:
        """
        Create an item under parent_id at index (append when None).

        Without kind, an item with a url is a link and one without is a folder.
        """
        pass

    @abstractmethod
    async def move(self, node_id: str, index: int) -> None:
        """Move node_id to index within its current parent."""
        pass

    @abstractmethod
    async def remove_tree(self, node_id: str) -> None:
        """Remove node_id and its entire subtree."""
        pass

    def add_listener(self, listener: TreeListener) -> None:
        """Subscribe to created/moved/changed/removed events; subscribing twice is a no-op."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: TreeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def emit(self, kind: TreeEventKind, node_id: Optional[str] = None) -> None:
        """Deliver an event to every listener without waiting for them to finish."""
        event = TreeEvent(kind=kind, node_id=node_id)
        for listener in list(self._listeners):
            task = asyncio.ensure_future(listener(event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        await asyncio.sleep(0)

    async def drain_events(self) -> None:
        """Wait until every delivered event, and any event it caused, has been handled."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
