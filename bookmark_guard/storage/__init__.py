"""Persistent storage for the lock flag and snapshot."""

from .base import BaseStore
from .manager import StorageManager

__all__ = ["BaseStore", "StorageManager"]
