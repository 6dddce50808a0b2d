"""
Configuration loading for auto-responder.

Turns the raw rules document into a normalized ``RuleSet``. Loading happens in
two stages: ``extract_config`` accepts anything shaped roughly like the rules
file, then ``build_settings``/``build_rules`` construct the canonical types
with the defaults from ``core.config``.
"""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from core.config import ACTION_DEFAULTS, RULE_DEFAULTS, ConfigError, build_settings
from core.constants import CooldownScope, MatchMode, R, ReplyMode, W
from core.io_utils import read_json
from core.types import Action, AllowedMentions, Rule, RuleSet, Settings, Where
from core.utils import coerce_str, is_nonneg_number, is_number, random_id, str_tuple

logger = logging.getLogger("autoreply.config")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def extract_config(data: Any) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Split a raw rules document into its settings and rule objects.

    Raises ConfigError when the document is not an object at all; a missing
    or malformed ``settings``/``rules`` member just means "none".
    """
    if not isinstance(data, dict):
        raise ConfigError("Rules file must contain a JSON object")

    settings = _as_dict(data.get("settings"))
    rules = data.get("rules")
    if not isinstance(rules, list):
        rules = []

    return settings, [rule for rule in rules if isinstance(rule, dict)]


def normalize_where(value: Any) -> Where:
    raw = _as_dict(value)
    return Where(
        allow_channels=frozenset(str_tuple(raw.get(W.ALLOW_CHANNELS))),
        deny_channels=frozenset(str_tuple(raw.get(W.DENY_CHANNELS))),
        allow_roles=frozenset(str_tuple(raw.get(W.ALLOW_ROLES))),
        deny_roles=frozenset(str_tuple(raw.get(W.DENY_ROLES))),
        allow_users=frozenset(str_tuple(raw.get(W.ALLOW_USERS))),
        deny_users=frozenset(str_tuple(raw.get(W.DENY_USERS))),
    )


def _flag(raw: Dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key)
    return value if isinstance(value, bool) else default


def normalize_action(value: Any, default_mode: str) -> Action:
    """Build the action shared by a rule and all of its entries (no replies yet)."""
    raw = _as_dict(value)
    mentions = _as_dict(raw.get(R.ALLOWED_MENTIONS))
    mode = raw.get(R.MODE)
    return Action(
        mode=mode if mode in ReplyMode.ALL else default_mode,
        mention_author=_flag(raw, R.MENTION_AUTHOR, ACTION_DEFAULTS["mention_author"]),
        allowed_mentions=AllowedMentions(
            users=_flag(mentions, "users", ACTION_DEFAULTS["mention_users"]),
            roles=_flag(mentions, "roles", ACTION_DEFAULTS["mention_roles"]),
            everyone=_flag(mentions, "everyone", ACTION_DEFAULTS["mention_everyone"]),
        ),
        delete_trigger_message=_flag(
            raw, R.DELETE_TRIGGER_MESSAGE, ACTION_DEFAULTS["delete_trigger_message"]
        ),
    )


def normalize_match(value: Any) -> str:
    if value in MatchMode.ALL:
        return value
    if value is not None:
        logger.debug("Unknown match mode %r, using %s", value, RULE_DEFAULTS["match"])
    return RULE_DEFAULTS["match"]


def _optional_bound(value: Any) -> Optional[float]:
    return value if is_nonneg_number(value) else None


def expand_rule(
    raw: Dict[str, Any],
    settings: Settings,
    rng: Optional[random.Random] = None,
) -> List[Rule]:
    """
    Expand one raw rule into zero or more normalized rules.

    A rule with a non-empty ``entries`` list becomes one rule per usable entry
    (id ``<base>:<index>``); otherwise its inline ``triggers`` and
    ``action.replies`` form a single rule. Anything without triggers or
    replies is dropped.
    """
    base_id = coerce_str(raw.get(R.ID)) or random_id(rng)
    per = raw.get(R.PER)
    cooldown = raw.get(R.COOLDOWN_MS)
    enabled = raw.get(R.ENABLED)
    case_insensitive = raw.get(R.CASE_INSENSITIVE)

    shared: Dict[str, Any] = {
        "enabled": enabled if isinstance(enabled, bool) else RULE_DEFAULTS["enabled"],
        "case_insensitive": (
            case_insensitive
            if isinstance(case_insensitive, bool)
            else RULE_DEFAULTS["case_insensitive"]
        ),
        "min_words": _optional_bound(raw.get(R.MIN_WORDS)),
        "max_words": _optional_bound(raw.get(R.MAX_WORDS)),
        "cooldown_ms": cooldown if is_number(cooldown) else settings.default_cooldown_ms,
        "per": per if per in CooldownScope.ALL else RULE_DEFAULTS["per"],
        "where": normalize_where(raw.get(R.WHERE)),
    }
    action_raw = _as_dict(raw.get(R.ACTION))
    action_base = normalize_action(action_raw, settings.reply_mode_default)

    entries = raw.get(R.ENTRIES)
    if isinstance(entries, list) and entries:
        rules: List[Rule] = []
        usable = [entry for entry in entries if isinstance(entry, dict)]
        for index, entry in enumerate(usable):
            match = entry.get(R.MATCH)
            if match is None:
                match = raw.get(R.MATCH)
            triggers = str_tuple(entry.get(R.TRIGGERS))
            replies = str_tuple(entry.get(R.REPLIES))
            if not triggers or not replies:
                logger.debug("Dropping entry %s:%s without triggers or replies", base_id, index)
                continue
            rules.append(
                Rule(
                    id=f"{base_id}:{index}",
                    triggers=triggers,
                    action=_with_replies(action_base, replies),
                    match=normalize_match(match),
                    **shared,
                )
            )
        return rules

    triggers = str_tuple(raw.get(R.TRIGGERS))
    replies = str_tuple(action_raw.get(R.REPLIES))
    if not triggers or not replies:
        logger.debug("Dropping rule %s without triggers or replies", base_id)
        return []

    return [
        Rule(
            id=base_id,
            triggers=triggers,
            action=_with_replies(action_base, replies),
            match=normalize_match(raw.get(R.MATCH)),
            **shared,
        )
    ]


def _with_replies(action: Action, replies: Tuple[str, ...]) -> Action:
    return Action(
        mode=action.mode,
        mention_author=action.mention_author,
        allowed_mentions=action.allowed_mentions,
        delete_trigger_message=action.delete_trigger_message,
        replies=replies,
    )


def build_rules(
    raw_rules: List[Dict[str, Any]],
    settings: Settings,
    rng: Optional[random.Random] = None,
) -> Tuple[Rule, ...]:
    rules: List[Rule] = []
    seen: set[str] = set()

    for raw in raw_rules:
        try:
            expanded = expand_rule(raw, settings, rng)
        except Exception as e:
            logger.warning("Skipping malformed rule %r: %s", raw.get(R.ID), e)
            continue
        for rule in expanded:
            if rule.id in seen:
                logger.warning("Duplicate rule id %s, keeping the first definition", rule.id)
                continue
            seen.add(rule.id)
            rules.append(rule)

    return tuple(rules)


def normalize_config(data: Any, rng: Optional[random.Random] = None) -> RuleSet:
    """Normalize a parsed rules document. Raises ConfigError if it is unusable."""
    raw_settings, raw_rules = extract_config(data)
    settings = build_settings(raw_settings)
    return RuleSet(settings=settings, rules=build_rules(raw_rules, settings, rng))


async def load_rules_file(path: Path) -> Any:
    """
    Read the raw rules document from disk.

    A missing or unparsable file is a ConfigError.
    """
    try:
        data = await read_json(path, default=None)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise ConfigError(f"Cannot read rules file {path}: {e}") from e
    if data is None:
        raise ConfigError(f"Missing rules file: {path}")
    return data
