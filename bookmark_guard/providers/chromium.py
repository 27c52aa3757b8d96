"""
Chromium Bookmarks file provider for Bookmark Guard.

Chrome, Edge, Brave and friends keep bookmarks in a JSON file at
{profile}/Bookmarks shaped like:

    {"checksum": "...", "version": 1,
     "roots": {"bookmark_bar": {...}, "other": {...}, "synced": {...}}}

Every node has "id", "name" and "type" ("url" or "folder"); urls carry "url",
folders carry "children". The format has no separators.
"""

import json
import logging
import os
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import ProviderOperationError
from ..models import NodeKind, TreeEventKind
from .memory import InMemoryTreeProvider, _Record

CHROMIUM_TREE_ROOT_ID = "0"
ROOT_KEYS = ("bookmark_bar", "other", "synced")

# Seconds between 1601-01-01 (WebKit epoch) and 1970-01-01
_WEBKIT_EPOCH_OFFSET = 11644473600


def _webkit_timestamp() -> str:
    return str(int((time.time() + _WEBKIT_EPOCH_OFFSET) * 1000000))


class ChromiumBookmarksProvider(InMemoryTreeProvider):
    """
    Tree provider mirroring a Chromium Bookmarks file.

    Writes go to the in-memory mirror first and are then flushed to disk
    atomically. External edits to the file are picked up by poll().
    """

    def __init__(self, bookmarks_file: str):
        """
        Initialize the provider and load the bookmarks file.

        Args:
            bookmarks_file: Path to the Chromium "Bookmarks" JSON file
        """
        super().__init__(roots=[], tree_root_id=CHROMIUM_TREE_ROOT_ID)
        self.bookmarks_file = Path(bookmarks_file)
        self._document: Dict[str, Any] = {}
        self._root_keys: Dict[str, str] = {}
        self._mtime: Optional[float] = None
        self.load()

    def load(self) -> None:
        """(Re)build the mirror from the file on disk."""
        try:
            with open(self.bookmarks_file, 'r', encoding='utf-8') as f:
                document = json.load(f)
            mtime = self.bookmarks_file.stat().st_mtime
        except (OSError, json.JSONDecodeError) as e:
            raise ProviderOperationError(f"Could not read bookmarks file {self.bookmarks_file}: {e}")

        self._reset([])
        self._document = document
        self._root_keys = {}
        roots = document.get("roots", {})
        for key in ROOT_KEYS:
            raw_root = roots.get(key)
            if not isinstance(raw_root, dict):
                continue
            root_id = self._add_raw(raw_root, self.tree_root_id)
            self._root_keys[root_id] = key

        self._mtime = mtime
        logging.info(f"Loaded {len(self._nodes) - 1} bookmark items from {self.bookmarks_file}")

    async def poll(self) -> bool:
        """
        Reload the file if something else modified it.

        Returns:
            True if the file changed and a "changed" event was emitted
        """
        try:
            mtime = self.bookmarks_file.stat().st_mtime
        except OSError as e:
            raise ProviderOperationError(f"Could not stat bookmarks file {self.bookmarks_file}: {e}")
        if mtime == self._mtime:
            return False

        self.load()
        await self.emit(TreeEventKind.CHANGED)
        return True

    def _add_raw(self, raw: Dict[str, Any], parent_id: str) -> str:
        node_id = str(raw.get("id") or self._allocate_id())
        is_folder = raw.get("type") == "folder"
        extra = {k: v for k, v in raw.items() if k not in ("id", "name", "type", "url", "children")}
        record = _Record(
            id=node_id,
            parent_id=parent_id,
            kind=NodeKind.FOLDER.value if is_folder else NodeKind.LINK.value,
            title=raw.get("name", ""),
            url=None if is_folder else raw.get("url", ""),
            extra=extra,
        )
        self._nodes[node_id] = record
        self._nodes[parent_id].children.append(node_id)
        for child in raw.get("children", []) if is_folder else []:
            self._add_raw(child, node_id)
        return node_id

    def _check_create(self, record: _Record) -> None:
        if record.kind == NodeKind.SEPARATOR.value:
            raise ProviderOperationError("Chromium bookmark files cannot store separators")
        now = _webkit_timestamp()
        record.extra = {"guid": str(uuid.uuid4()), "date_added": now}
        if record.kind == NodeKind.FOLDER.value:
            record.extra["date_modified"] = now

    def _to_raw(self, node_id: str) -> Dict[str, Any]:
        record = self._nodes[node_id]
        raw: Dict[str, Any] = dict(record.extra)
        raw["id"] = record.id
        raw["name"] = record.title
        if record.kind == NodeKind.FOLDER.value:
            raw["type"] = "folder"
            raw["children"] = [self._to_raw(child_id) for child_id in record.children]
        else:
            raw["type"] = "url"
            raw["url"] = record.url or ""
        return raw

    def _persist(self) -> None:
        document = dict(self._document)
        # Chromium recomputes the checksum when it is absent
        document.pop("checksum", None)
        roots = dict(document.get("roots", {}))
        for root_id, key in self._root_keys.items():
            roots[key] = self._to_raw(root_id)
        document["roots"] = roots

        tmp_path = self.bookmarks_file.with_name(self.bookmarks_file.name + ".tmp")
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=3, ensure_ascii=False)
            os.replace(tmp_path, self.bookmarks_file)
            self._mtime = self.bookmarks_file.stat().st_mtime
        except OSError as e:
            raise ProviderOperationError(f"Could not write bookmarks file {self.bookmarks_file}: {e}")
        self._document = document
