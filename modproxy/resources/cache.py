# modproxy/resources/cache.py
from __future__ import annotations

import asyncio
import logging
import os
import secrets
from os import PathLike
from pathlib import Path

from modproxy.core.errors import CacheWriteError, ResourceNotFoundError
from modproxy.resources.paths import mapToLocal

logger = logging.getLogger(__name__)

__all__ = ["LocalCache", "readLocalFile"]



async def readLocalFile(path: str | PathLike[str]) -> bytes:
    """Read a mod or cache file off the event loop. Any OSError means "not here"."""
    try:
        return await asyncio.to_thread(Path(path).read_bytes)
    except OSError as err:
        raise ResourceNotFoundError(path, err.strerror or type(err).__name__) from err



def _writeAtomic(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Unique temp name per writer; concurrent first fetches of one resource race on replace() only
    tmpPath = path.with_name(f".{path.name}.{secrets.token_hex(4)}.tmp")
    try:
        with open(tmpPath, "wb") as fl:
            fl.write(data)
        os.replace(tmpPath, path)
    except OSError:
        tmpPath.unlink(missing_ok=True)
        raise



class LocalCache:
    """
    On-disk mirror of the remote path hierarchy under `root`. No sidecar
    metadata is written. Writes are scheduled in the background so a response
    never waits for persistence.
    """
    def __init__(self, root: str | PathLike[str]) -> None:
        self.root = Path(root)
        self._pending: set[asyncio.Task[None]] = set()

    def pathFor(self, url: str) -> Path:
        return mapToLocal(url, self.root)

    async def read(self, path: str | PathLike[str]) -> bytes:
        return await readLocalFile(path)

    async def write(self, path: str | PathLike[str], data: bytes) -> None:
        try:
            await asyncio.to_thread(_writeAtomic, Path(path), bytes(data))
        except OSError as err:
            raise CacheWriteError(f"failed to write cache file '{path}': {err}") from err
        logger.debug("Cached %d bytes at '%s'", len(data), path)

    async def _writeLogged(self, path: Path, data: bytes) -> None:
        try:
            await self.write(path, data)
        except CacheWriteError as err:
            logger.warning("%s", err)

    def scheduleWrite(self, path: str | PathLike[str], data: bytes) -> asyncio.Task[None]:
        """Fire-and-forget write. Failures are logged, never raised to the caller."""
        task = asyncio.get_running_loop().create_task(self._writeLogged(Path(path), data))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pendingWrites(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled write (shutdown, tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
