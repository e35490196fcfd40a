"""Safe Stride Backend — Geocode result cache"""

import time
from typing import Any, Optional


class TTLCache:
    """Expiring key/value store, oldest entry dropped when full.

    Holds external geocoder answers only; synthesized routes are never cached.
    """

    def __init__(self, default_ttl: int = 3600, max_size: int = 500):
        self._store: dict[str, tuple[Any, float]] = {}
        self._default_ttl = default_ttl
        self._max_size = max_size

    def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if time.monotonic() > expires_at:
            del self._store[key]
            return None
        return value

    def set(self, key: str, value: Any):
        if key not in self._store and len(self._store) >= self._max_size:
            now = time.monotonic()
            self._store = {k: e for k, e in self._store.items() if e[1] >= now}
            if len(self._store) >= self._max_size:
                del self._store[min(self._store, key=lambda k: self._store[k][1])]
        self._store[key] = (value, time.monotonic() + self._default_ttl)

    def clear(self):
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


geocode_cache = TTLCache(default_ttl=86400)
