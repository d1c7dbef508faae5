"""
paver/utils/fileio.py

The small set of filesystem operations the Terraform executor performs directly:
writing a file with a given mode, listing a directory, stat'ing a path and
creating a directory tree. Grouped in one class so callers (and tests) can swap
the implementation.
"""

from __future__ import annotations

import os
import asyncio
from typing import List

import aiofiles
import aiofiles.os


class FileIO:
    """Local-disk implementation of the executor's filesystem needs."""

    async def write_file(self, path: str, data: str, mode: int) -> None:
        """Write `data` to `path`, replacing any existing content, then apply `mode`.

        Args:
            path (str): Destination file.
            data (str): Text to write.
            mode (int): Permission bits, e.g. 0o644.
        """
        async with aiofiles.open(path, "w") as f:
            await f.write(data)
        await asyncio.to_thread(os.chmod, path, mode)

    async def read_dir(self, path: str) -> List[str]:
        """Return the names of the entries in `path` (order unspecified)."""
        return await aiofiles.os.listdir(path)

    async def stat(self, path: str) -> os.stat_result:
        """Stat `path`; raises FileNotFoundError if it does not exist."""
        return await aiofiles.os.stat(path)

    async def makedirs(self, path: str) -> None:
        """Create `path` and any missing parents; an existing directory is fine."""
        await aiofiles.os.makedirs(path, exist_ok=True)

    async def exists(self, path: str) -> bool:
        """True if `path` can be stat'ed."""
        try:
            await self.stat(path)
        except OSError:
            return False
        return True
