"""
Path resolution utilities.

Relative paths from the environment (rules file and friends) are resolved
against the repository root rather than the working directory.
"""
from __future__ import annotations

from pathlib import Path
from typing import Union

BASE_DIR = Path(__file__).resolve().parent.parent


def resolve_repo_path(path: Union[str, Path]) -> Path:
    candidate = Path(path).expanduser()
    if candidate.is_absolute() or candidate.drive:
        return candidate
    return BASE_DIR / candidate
