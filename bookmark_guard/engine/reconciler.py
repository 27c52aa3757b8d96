"""
Tree reconciliation for Bookmark Guard.

Brings the live children of a folder back in line with a captured snapshot
using positional create/move/remove operations.

For each desired position i, in ascending order:
  1) pick the leftmost unconsumed live item with the same (title, url)
  2) no candidate: create the desired item (and its whole subtree) at i
  3) candidate: move it to i if it sits elsewhere; folders are descended into
After every position is settled, unconsumed live items are removed.

Kinds are not part of the match, so an untitled folder and a separator can
stand in for each other. Folder descent runs from an explicit worklist of
(parent_id, current_children, desired_children) frames, after the parent
level has been settled.
"""

import logging
from typing import List, Optional, Sequence, Set, Tuple

from ..models import CanonicalNode, LiveNode, NodeKind, ReconciliationReport
from ..providers import BaseTreeProvider

# (parent_id, live children or None to fetch on demand, desired children)
_Frame = Tuple[str, Optional[List[LiveNode]], Sequence[CanonicalNode]]


class TreeReconciler:
    """
    Applies corrective operations through a tree provider.

    Provider errors propagate; the caller decides how far a failure reaches.
    """

    def __init__(self, provider: BaseTreeProvider):
        self.provider = provider

    async def reconcile(self, parent_id: str, current_children: Sequence[LiveNode],
                        desired_children: Sequence[CanonicalNode],
                        report: Optional[ReconciliationReport] = None) -> ReconciliationReport:
        """
        Make parent_id's subtree match desired_children.

        Args:
            parent_id: Folder whose children are reconciled
            current_children: Its live children in provider order
            desired_children: The canonical children it should have
            report: Optional report to accumulate operation counts into

        Returns:
            The report with the operations applied
        """
        report = report if report is not None else ReconciliationReport()
        stack: List[_Frame] = [(parent_id, list(current_children), desired_children)]

        while stack:
            folder_id, current, desired = stack.pop()
            if current is None:
                current = await self.provider.get_children(folder_id)
            descend = await self._reconcile_level(folder_id, current, desired, report)
            for matched_id, wanted in reversed(descend):
                stack.append((matched_id, None, wanted))

        return report

    async def _reconcile_level(self, parent_id: str, current: List[LiveNode],
                               desired: Sequence[CanonicalNode],
                               report: ReconciliationReport) -> List[Tuple[str, Sequence[CanonicalNode]]]:
        consumed: Set[str] = set()
        # Live sibling order as our own operations change it
        order = [node.id for node in current]
        descend: List[Tuple[str, Sequence[CanonicalNode]]] = []

        for i, want in enumerate(desired):
            key = want.match_key()
            found = next(
                (cur for cur in current if cur.id not in consumed and cur.match_key() == key),
                None,
            )

            if found is None:
                created = await self._create_subtree(parent_id, want, i, report)
                consumed.add(created.id)
                order.insert(i, created.id)
                continue

            consumed.add(found.id)
            if order.index(found.id) != i:
                await self.provider.move(found.id, i)
                report.moves += 1
                order.remove(found.id)
                order.insert(i, found.id)

            if want.is_folder:
                descend.append((found.id, want.children))

        for cur in current:
            if cur.id not in consumed:
                logging.debug(f"Removing unexpected item {cur.id} ({cur.title!r}) from {parent_id}")
                await self.provider.remove_tree(cur.id)
                report.deletes += 1

        return descend

    async def _create_subtree(self, parent_id: str, node: CanonicalNode, index: int,
                              report: ReconciliationReport) -> LiveNode:
        created = await self._create_one(parent_id, node, index, report)
        pending = [(created.id, node.children)] if node.is_folder else []
        while pending:
            folder_id, children = pending.pop()
            for position, child in enumerate(children):
                made = await self._create_one(folder_id, child, position, report)
                if child.is_folder and child.children:
                    pending.append((made.id, child.children))
        return created

    async def _create_one(self, parent_id: str, node: CanonicalNode, index: Optional[int],
                          report: ReconciliationReport) -> LiveNode:
        logging.debug(f"Creating {node.kind.value} {node.title!r} in {parent_id} at {index}")
        if node.kind == NodeKind.LINK:
            created = await self.provider.create(parent_id, index, node.title,
                                                 url=node.url, kind=NodeKind.LINK.value)
        else:
            created = await self.provider.create(parent_id, index, node.title, kind=node.kind.value)
        report.creates += 1
        return created
