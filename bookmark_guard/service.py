"""
Guard service wiring for Bookmark Guard.

Builds the store, provider, indicator and orchestrator from configuration and
keeps a file-backed provider under watch.
"""

import asyncio
import logging
from typing import Optional

from .channel import CommandChannel
from .config import ConfigManager, config
from .engine import ReconciliationOrchestrator
from .errors import ProviderOperationError, StorageError
from .indicator import BadgeIndicator, BaseIndicator
from .log import log
from .models import LockState
from .providers import BaseTreeProvider, ChromiumBookmarksProvider
from .storage import StorageManager


class GuardService:
    """
    Owns one protected bookmark tree and its persisted guard state.
    """

    def __init__(self, provider: BaseTreeProvider, store: StorageManager,
                 indicator: Optional[BaseIndicator] = None,
                 config_manager: Optional[ConfigManager] = None):
        self.config = config_manager or config
        self.provider = provider
        self.store = store
        self.indicator = indicator or BadgeIndicator()
        self.orchestrator = ReconciliationOrchestrator(
            provider, store, indicator=self.indicator, locked_glyph=self.config.locked_glyph
        )
        self.channel = CommandChannel(self.orchestrator)

    @classmethod
    def from_config(cls, config_manager: Optional[ConfigManager] = None) -> "GuardService":
        """
        Create a service protecting the configured Chromium Bookmarks file.
        """
        cfg = config_manager or config
        store = StorageManager(cfg.storage_filename, table=cfg.storage_table)
        provider = ChromiumBookmarksProvider(cfg.bookmarks_file)
        return cls(provider, store, config_manager=cfg)

    async def start(self) -> LockState:
        """Open storage, initialize the lock flag and start listening for events."""
        if self.store.connection is None:
            self.store.connect()
            self.store.initialize_database()
        state = await self.orchestrator.initialize()
        self.orchestrator.attach()
        return state

    async def poll_once(self) -> bool:
        """Check a file-backed provider for outside edits and settle any resulting pass."""
        poll = getattr(self.provider, "poll", None)
        if poll is None:
            return False
        changed = await poll()
        await self.provider.drain_events()
        return changed

    async def run(self, interval: Optional[float] = None) -> None:
        """Poll forever."""
        interval = interval if interval is not None else self.config.poll_interval
        await self.start()
        try:
            while True:
                try:
                    await self.poll_once()
                except (ProviderOperationError, StorageError) as e:
                    log("error", f"Polling failed: {e}")
                await asyncio.sleep(interval)
        finally:
            self.stop()

    def stop(self) -> None:
        self.orchestrator.detach()
        self.store.disconnect()
        logging.info("Guard service stopped")
