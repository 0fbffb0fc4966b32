"""Degrading KeyValueStore wrapper.

Every write is mirrored into memory. The first StorageError from the
primary store switches the wrapper to memory-only for the rest of its
life, so a broken backend costs persistence across reloads but never
breaks the verification flow.
"""

from typing import Optional

from errors import StorageError
from infrastructure.storage.memory import MemoryStore
from infrastructure.storage.protocol import KeyValueStore
from shared.logging import get_logger

log = get_logger(__name__)


class SafeStore:
    def __init__(self, primary: Optional[KeyValueStore]) -> None:
        self._primary = primary
        self._memory = MemoryStore()
        self._degraded = primary is None

    @property
    def degraded(self) -> bool:
        return self._degraded

    def _degrade(self, operation: str, error: StorageError) -> None:
        if not self._degraded:
            log.warning(
                "storage_degraded",
                operation=operation,
                error=error.message,
                details=error.details,
            )
        self._degraded = True

    def get(self, key: str) -> Optional[str]:
        if not self._degraded:
            try:
                value = self._primary.get(key)
            except StorageError as e:
                self._degrade("get", e)
            else:
                if value is not None:
                    self._memory.set(key, value)
                return value
        return self._memory.get(key)

    def set(self, key: str, value: str) -> None:
        self._memory.set(key, value)
        if self._degraded:
            return
        try:
            self._primary.set(key, value)
        except StorageError as e:
            self._degrade("set", e)

    def remove(self, key: str) -> None:
        self._memory.remove(key)
        if self._degraded:
            return
        try:
            self._primary.remove(key)
        except StorageError as e:
            self._degrade("remove", e)
