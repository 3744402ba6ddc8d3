from __future__ import annotations

import logging
import threading
from typing import Callable

from .semantic import SemanticIndex

logger = logging.getLogger(__name__)


class IndexRegistry:
    """One `SemanticIndex` per owner.

    Owners are isolated physically: dropping or mutating one owner's index
    never touches another's entries or vocabulary.
    """

    def __init__(self, factory: Callable[[], SemanticIndex] = SemanticIndex) -> None:
        self._factory = factory
        self._indexes: dict[str, SemanticIndex] = {}
        self._lock = threading.Lock()

    def get(self, owner_id: str) -> SemanticIndex | None:
        with self._lock:
            return self._indexes.get(str(owner_id))

    def get_or_create(self, owner_id: str) -> SemanticIndex:
        key = str(owner_id)
        with self._lock:
            index = self._indexes.get(key)
            if index is None:
                index = self._factory()
                self._indexes[key] = index
                logger.debug("Created index for owner %s", key)
            return index

    def drop(self, owner_id: str) -> bool:
        with self._lock:
            index = self._indexes.pop(str(owner_id), None)
        if index is None:
            return False
        index.drop()
        return True

    def owners(self) -> list[str]:
        with self._lock:
            return list(self._indexes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._indexes)
