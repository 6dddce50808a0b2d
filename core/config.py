"""
Process configuration and rule-file defaults.

Environment settings are read once at import time (``main.py`` loads ``.env``
first). Every default for the rules file lives in the tables below so the
loader never has to invent a fallback inline.
"""
from __future__ import annotations

import os
from typing import Any, Dict, Optional, Tuple

from .constants import CooldownScope, MatchMode, ReplyMode, S
from .paths import resolve_repo_path
from .types import Settings
from .utils import is_nonneg_number

# ─── Environment ──────────────────────────────────────────────────────────────


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip().isdigit():
        return None
    return int(raw.strip())


BOT_TOKEN = os.getenv("DISCORD_BOT_TOKEN") or os.getenv("BOT_TOKEN")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
RULES_PATH = resolve_repo_path(os.getenv("RULES_PATH", "rules.json"))
RULES_POLL_SECONDS = _env_float("RULES_POLL_SECONDS", 0.8)
HEALTH_HOST = os.getenv("HEALTH_HOST", "0.0.0.0")
HEALTH_PORT = _env_int("HEALTH_PORT")

# ─── Rules file defaults ──────────────────────────────────────────────────────

# field name -> (raw key, type name, default)
SETTINGS_SCHEMA: Dict[str, Tuple[str, str, Any]] = {
    "reply_mode_default": (S.REPLY_MODE_DEFAULT, "reply_mode", ReplyMode.REPLY),
    "ignore_bots": (S.IGNORE_BOTS, "bool", True),
    "ignore_dms": (S.IGNORE_DMS, "bool", True),
    "ignore_prefixes": (S.IGNORE_PREFIXES, "list_str", ()),
    "ignore_urls": (S.IGNORE_URLS, "bool", False),
    "default_cooldown_ms": (S.DEFAULT_COOLDOWN_MS, "nonneg_number", 3000),
    "max_message_length": (S.MAX_MESSAGE_LENGTH, "nonneg_int", 4000),
    "log_matches": (S.LOG_MATCHES, "bool", False),
}

# Defaults for rule fields not covered by settings
RULE_DEFAULTS: Dict[str, Any] = {
    "enabled": True,
    "case_insensitive": True,
    "per": CooldownScope.USER,
    "match": MatchMode.WILDCARD,
}

ACTION_DEFAULTS: Dict[str, Any] = {
    "mention_author": True,
    "delete_trigger_message": False,
    "mention_users": True,
    "mention_roles": False,
    "mention_everyone": False,
}


class ConfigError(RuntimeError):
    pass


def coerce_setting(type_name: str, value: Any, default: Any) -> Any:
    """Validate one raw settings value, returning ``default`` when invalid."""
    if type_name == "bool":
        return value if isinstance(value, bool) else default
    if type_name == "reply_mode":
        return value if value in ReplyMode.ALL else default
    if type_name == "nonneg_number":
        return value if is_nonneg_number(value) else default
    if type_name == "nonneg_int":
        return int(value) if is_nonneg_number(value) else default
    if type_name == "list_str":
        if not isinstance(value, list):
            return default
        # An empty prefix would match every message
        return tuple(item for item in value if isinstance(item, str) and item)
    raise ConfigError(f"Unknown settings type {type_name}")


def build_settings(raw: Dict[str, Any]) -> Settings:
    values: Dict[str, Any] = {}
    for name, (key, type_name, default) in SETTINGS_SCHEMA.items():
        if key not in raw:
            values[name] = default
            continue
        values[name] = coerce_setting(type_name, raw[key], default)
    return Settings(**values)
