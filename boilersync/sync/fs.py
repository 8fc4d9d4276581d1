"""Local working tree access for the sync orchestrator."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalFileSystem:
    """Reads and writes text files under a workspace root.

    Every path is resolved against the root and must stay inside it.
    Blocking pathlib calls run in a worker thread.
    """

    def __init__(self, root: str | Path = ".") -> None:
        self.root = Path(root).resolve()

    def resolve(self, path: str) -> Path:
        full = (self.root / path).resolve()
        if not full.is_relative_to(self.root):
            raise ValueError(f"Path escapes workspace: {path}")
        return full

    async def exists(self, path: str) -> bool:
        full = self.resolve(path)
        return await asyncio.to_thread(full.exists)

    async def read_text(self, path: str) -> str | None:
        """Return the file's text, or None if it does not exist."""
        full = self.resolve(path)

        def _read() -> str:
            with open(full, encoding="utf-8", newline="") as f:
                return f.read()

        try:
            return await asyncio.to_thread(_read)
        except FileNotFoundError:
            return None

    async def write_text(self, path: str, content: str) -> None:
        full = self.resolve(path)

        def _write() -> None:
            full.parent.mkdir(parents=True, exist_ok=True)
            # newline="" on both read and write keeps line endings untouched
            with open(full, "w", encoding="utf-8", newline="") as f:
                f.write(content)

        await asyncio.to_thread(_write)
        logger.debug("wrote %s (%d chars)", full, len(content))
