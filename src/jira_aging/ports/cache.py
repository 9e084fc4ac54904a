from typing import Optional


class ResponseCache:
    """Abstract storage for raw response bodies keyed by name."""

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def put(self, key: str, body: bytes) -> None:
        raise NotImplementedError
