"""KeyValueStore protocol — durable string storage for timer anchors.

Implementations are synchronous and only promise single-key atomicity.
Failures surface as ``errors.StorageError``.
"""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...
