"""
Persistent key-value store interface for Bookmark Guard.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable


class BaseStore(ABC):
    """
    Abstract key-value store holding the lock flag and the snapshot.

    Values are JSON-compatible. Implementations raise StorageError on failure
    and never substitute defaults for values they could not read.
    """

    @abstractmethod
    async def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        """
        Read several keys at once.

        Returns:
            Mapping containing only the keys that exist in the store
        """
        pass

    @abstractmethod
    async def set(self, mapping: Dict[str, Any]) -> None:
        """Write every key of mapping atomically."""
        pass
