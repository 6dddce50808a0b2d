"""
Hot reload for the rules file.

Polls the file's modification time and reloads the engine when it changes.
A failed reload keeps the rules that are already active.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from core.config import ConfigError
from core.io_utils import stat_mtime

from .engine import AutoResponderEngine

logger = logging.getLogger("autoreply.config")


class RulesWatcher:
    def __init__(
        self,
        engine: AutoResponderEngine,
        path: Path,
        interval: float = 0.8,
    ) -> None:
        self.engine = engine
        self.path = path
        self.interval = interval
        self.last_mtime: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    async def prime(self) -> None:
        """Remember the current mtime so the first poll does not reload."""
        self.last_mtime = await stat_mtime(self.path)

    async def check_once(self) -> bool:
        """Reload if the file changed since the last check. Returns True on reload."""
        mtime = await stat_mtime(self.path)
        if mtime is None or mtime == self.last_mtime:
            return False
        self.last_mtime = mtime

        try:
            await self.engine.reload_from_file(self.path)
        except ConfigError as e:
            logger.error("Rules reload failed: %s", e)
            return False
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.check_once()
            except Exception:
                logger.exception("Rules watcher check failed for %s", self.path)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
