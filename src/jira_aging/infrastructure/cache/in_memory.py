from __future__ import annotations

from typing import Dict, Optional

from jira_aging.ports.cache import ResponseCache


class InMemoryResponseCache(ResponseCache):
    def __init__(self) -> None:
        self._storage: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._storage.get(key)

    def put(self, key: str, body: bytes) -> None:
        self._storage[key] = body

    def keys(self) -> list[str]:
        return list(self._storage)
