from __future__ import annotations

import logging
import os
import time
from datetime import timedelta
from pathlib import Path
from typing import Callable, Optional

from jira_aging.ports.cache import ResponseCache

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = timedelta(hours=1)


class FileResponseCache(ResponseCache):
    """File-based cache of raw API response bodies.

    Each key is stored as one file inside ``directory``. Entries older than
    ``max_age`` (by modification time) are treated as missing so the caller
    goes back to the network and overwrites them.
    """

    def __init__(
        self,
        directory: str | Path,
        max_age: timedelta = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize file-based response cache.

        Args:
            directory: Directory holding one file per cached response.
            max_age: Entries last written longer ago than this are ignored.
            clock: Returns the current time as a POSIX timestamp.
        """
        self.directory = Path(directory)
        self.max_age = max_age
        self._clock = clock

    def path_for(self, key: str) -> Path:
        return self.directory / key

    def is_fresh(self, path: Path) -> bool:
        try:
            modified = path.stat().st_mtime
        except OSError:
            return False
        return self._clock() - modified <= self.max_age.total_seconds()

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not self.is_fresh(path):
            return None
        try:
            body = path.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read cached response {path}: {e}")
            return None
        logger.debug(f"Cache hit for {key}")
        return body

    def put(self, key: str, body: bytes) -> None:
        path = self.path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write atomically using a temporary file
            fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as f:
                f.write(body)
            temp_path.replace(path)
        except OSError as e:
            logger.warning(f"Could not cache response to {path}: {e}")
            if temp_path.exists():
                temp_path.unlink()
