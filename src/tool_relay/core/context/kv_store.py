"""Small namespaced key-value store used by the context-tracking tools."""

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Tuple


class KVStore(Protocol):
    """
    Protocol for the key-value store backing an ExecutionContext.

    Implementations only need to honor per-entry expiration: an expired entry must read as absent.
    Callers needing persistence can inject a durable implementation behind this interface.
    """

    async def get(self, namespace: str, key: str) -> Optional[str]:
        """Return the stored value, or None if absent or expired."""
        ...

    async def set(self, namespace: str, key: str, value: str, ttl: Optional[float] = None) -> None:
        """Store a value, optionally expiring after ``ttl`` seconds."""
        ...

    async def delete(self, namespace: str, key: str) -> None:
        """Remove a value. Missing keys are ignored."""
        ...

    async def keys(self, namespace: str, prefix: str = "") -> List[str]:
        """List the live keys in a namespace that start with ``prefix``."""
        ...


@dataclass
class _Entry:
    value: str
    expires_at: Optional[float] = None


class InMemoryKVStore:
    """Process-local KVStore. Entries vanish with the process."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize an empty store.

        Args:
            clock: Monotonic time source in seconds. Injectable for tests.
        """
        self._clock = clock
        self._entries: Dict[Tuple[str, str], _Entry] = {}

    def _live(self, full_key: Tuple[str, str]) -> Optional[_Entry]:
        entry = self._entries.get(full_key)
        if entry is None:
            return None
        if entry.expires_at is not None and self._clock() >= entry.expires_at:
            del self._entries[full_key]
            return None
        return entry

    async def get(self, namespace: str, key: str) -> Optional[str]:
        entry = self._live((namespace, key))
        return entry.value if entry else None

    async def set(self, namespace: str, key: str, value: str, ttl: Optional[float] = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        self._entries[(namespace, key)] = _Entry(value=value, expires_at=expires_at)

    async def delete(self, namespace: str, key: str) -> None:
        self._entries.pop((namespace, key), None)

    async def keys(self, namespace: str, prefix: str = "") -> List[str]:
        candidates = [k for k in list(self._entries) if k[0] == namespace and k[1].startswith(prefix)]
        return sorted(k[1] for k in candidates if self._live(k) is not None)
