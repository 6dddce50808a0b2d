from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional


async def read_json(path: Path, default: Any = None) -> Any:
    def _read() -> Any:
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:
            return default

    return await asyncio.to_thread(_read)


async def stat_mtime(path: Path) -> Optional[float]:
    def _read() -> Optional[float]:
        try:
            return path.stat().st_mtime
        except FileNotFoundError:
            return None

    return await asyncio.to_thread(_read)
