"""
On-disk cache of listing pages.

Pages are stored as ``<cache_dir>/<city>_<key>.html`` and are considered
fresh while the file modification time is within the TTL.
"""
import asyncio
import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class HtmlCache:
    """
    File-based HTML cache.
    Disabled when no cache directory is configured.
    """

    def __init__(self, cache_dir: str = ""):
        self.cache_dir = Path(cache_dir) if cache_dir else None

    @property
    def enabled(self) -> bool:
        return self.cache_dir is not None

    def path_for(self, city: str, key: str) -> Optional[Path]:
        if self.cache_dir is None:
            return None
        return self.cache_dir / f"{city}_{key}.html"

    def _get_sync(self, city: str, key: str, ttl: timedelta) -> Optional[Tuple[bytes, datetime]]:
        """Synchronous get operation."""
        path = self.path_for(city, key)
        if path is None or ttl <= timedelta(0):
            return None

        try:
            modified = datetime.fromtimestamp(path.stat().st_mtime)
        except OSError:
            return None

        if datetime.now() - modified > ttl:
            logger.debug(f"Cache expired: {path}")
            return None

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.debug(f"Could not read cache ({path}): {e}")
            return None

        logger.debug(f"Cache hit: {path}")
        return data, modified

    def _set_sync(self, city: str, key: str, data: bytes) -> Optional[datetime]:
        """Synchronous set operation. Returns the write time, or None on failure."""
        path = self.path_for(city, key)
        if path is None:
            return None

        try:
            os.makedirs(path.parent, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create cache directory ({path.parent}): {e}")
            return None

        try:
            path.write_bytes(data)
        except OSError as e:
            logger.warning(f"Could not write cache ({path}): {e}")
            return None

        return datetime.now()

    async def get(self, city: str, key: str, ttl: timedelta) -> Optional[Tuple[bytes, datetime]]:
        """Async get operation: (page bytes, modification time) when fresh."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._get_sync, city, key, ttl)

    async def set(self, city: str, key: str, data: bytes) -> Optional[datetime]:
        """Async set operation."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._set_sync, city, key, data)
