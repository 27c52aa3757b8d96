"""
Reconciliation orchestrator for Bookmark Guard.

This module owns the lock flag handling and the guard that keeps at most one
reconciliation pass running. Every provider event funnels into
restore_snapshot(); events that arrive while a pass is running are dropped,
never queued, because the running pass converges the tree anyway.
"""

from typing import Any, Dict, List, Optional

from ..config import config
from ..errors import MalformedSnapshotError, ProviderOperationError
from ..indicator import BadgeIndicator, BaseIndicator
from ..log import log
from ..models import GuardState, LockState, ReconciliationReport, Snapshot, TreeEvent
from ..providers import BaseTreeProvider
from ..storage import BaseStore
from .canonicalizer import capture_snapshot
from .reconciler import TreeReconciler

LOCKED_KEY = "locked"
SNAPSHOT_KEY = "snapshot"


class ReconciliationOrchestrator:
    """
    Decides when to reconcile and drives the reconciler over every root.

    States: IDLE and RECONCILING. The state token is owned by this instance.
    """

    def __init__(self, provider: BaseTreeProvider, store: BaseStore,
                 indicator: Optional[BaseIndicator] = None,
                 reconciler: Optional[TreeReconciler] = None,
                 locked_glyph: Optional[str] = None):
        """
        Initialize the orchestrator.

        Args:
            provider: Live bookmark tree
            store: Persistent store for the lock flag and snapshot
            indicator: Lock indicator (defaults to an in-memory badge)
            reconciler: Reconciler to use (defaults to one bound to provider)
            locked_glyph: Badge text while locked (defaults to config value)
        """
        self.provider = provider
        self.store = store
        self.indicator = indicator or BadgeIndicator()
        self.reconciler = reconciler or TreeReconciler(provider)
        self.locked_glyph = locked_glyph if locked_glyph is not None else config.locked_glyph
        self._state = GuardState.IDLE
        self.passes = 0
        self.dropped_events = 0

    @property
    def state(self) -> GuardState:
        return self._state

    def is_reconciling(self) -> bool:
        return self._state == GuardState.RECONCILING

    # Wiring

    def attach(self) -> None:
        """Subscribe to the provider's created/moved/changed/removed events."""
        self.provider.add_listener(self.handle_event)

    def detach(self) -> None:
        self.provider.remove_listener(self.handle_event)

    async def handle_event(self, event: TreeEvent) -> None:
        await self.restore_snapshot()

    # Startup

    async def initialize(self) -> LockState:
        """
        Prepare the persisted state at session start.

        On first run the lock flag is missing and gets initialized to unlocked.

        Returns:
            The lock state the session starts with
        """
        data = await self.store.get([LOCKED_KEY])
        locked = data.get(LOCKED_KEY)

        if locked is None:
            log("init", "First run detected. Initializing to Unlocked.")
            locked = False
            await self.store.set({LOCKED_KEY: False})

        self._update_indicator(bool(locked))
        log("init", f"Session started. Mode: {'Locked' if locked else 'Unlocked'}")
        return LockState(locked=bool(locked))

    # Commands

    async def update_lock(self, value: bool) -> None:
        """
        Enable or disable protection.

        Enabling persists the flag and then re-captures the current tree, so
        protection is always armed against the present layout. Disabling only
        persists the flag; the stored snapshot is left as it is.
        """
        await self.store.set({LOCKED_KEY: value})
        if value:
            await self.take_snapshot()

        self._update_indicator(value)
        log("event", f"Protection {'Enabled' if value else 'Disabled'}")

    async def get_state(self) -> LockState:
        data = await self.store.get([LOCKED_KEY])
        return LockState(locked=bool(data.get(LOCKED_KEY, False)))

    async def take_snapshot(self) -> Snapshot:
        """Capture the live tree and store it as the new snapshot."""
        log("storage", "Capturing layout snapshot...")
        snapshot = await capture_snapshot(self.provider)
        await self.store.set({SNAPSHOT_KEY: snapshot.to_mapping()})
        log("storage", "Snapshot synchronized.")
        return snapshot

    # Reconciliation

    async def restore_snapshot(self) -> Optional[ReconciliationReport]:
        """
        Run one reconciliation pass if protection is on and none is running.

        Storage errors propagate. Provider and snapshot errors only abort the
        root they occur in.

        Returns:
            The pass report, or None when the trigger was dropped or unlocked
        """
        if self._state == GuardState.RECONCILING:
            self.dropped_events += 1
            return None

        self._state = GuardState.RECONCILING
        try:
            data = await self.store.get([LOCKED_KEY, SNAPSHOT_KEY])
            if not data.get(LOCKED_KEY, False):
                return None

            if SNAPSHOT_KEY not in data:
                log("error", "Locked without a stored snapshot; nothing restored")
                return ReconciliationReport(failed_roots=[SNAPSHOT_KEY])

            log("guard", "Unauthorized change detected. Reverting...")
            report = await self._reconcile_roots(data[SNAPSHOT_KEY])
            self.passes += 1
            log("guard", "Layout verified and restored.")
            return report
        finally:
            self._state = GuardState.IDLE

    async def _reconcile_roots(self, raw_snapshot: Any) -> ReconciliationReport:
        report = ReconciliationReport()
        if not isinstance(raw_snapshot, dict):
            log("error", f"Stored snapshot is not a mapping ({type(raw_snapshot).__name__}); nothing restored")
            report.failed_roots.append(SNAPSHOT_KEY)
            return report

        for root_id in await self._root_ids(raw_snapshot):
            try:
                desired = Snapshot.parse_root(root_id, raw_snapshot[root_id]) if root_id in raw_snapshot else ()
                current = await self.provider.get_children(root_id)
                await self.reconciler.reconcile(root_id, current, desired, report)
                report.roots.append(root_id)
            except (ProviderOperationError, MalformedSnapshotError) as e:
                report.failed_roots.append(root_id)
                log("error", f"Failed to restore root: {root_id} ({e})")

        return report

    async def _root_ids(self, raw_snapshot: Dict[str, Any]) -> List[str]:
        """Live top-level roots in order, then roots only the snapshot knows about."""
        try:
            tree = await self.provider.get_tree()
            live_ids = [root.id for root in tree.children or []]
        except ProviderOperationError as e:
            log("error", f"Could not list top-level roots: {e}")
            live_ids = []
        return live_ids + [root_id for root_id in raw_snapshot if root_id not in live_ids]

    def _update_indicator(self, locked: bool) -> None:
        self.indicator.set_badge_text(self.locked_glyph if locked else "")
