"""
Core utilities and infrastructure for the auto-reply bot.

This package contains:
- config: Environment settings, rules-file defaults and ConfigError
- constants: Raw config keys and enums
- io_utils: File I/O helpers
- paths: Path resolution
- types: Frozen dataclasses for settings, rules and message contexts
- utils: General utilities
"""
from .constants import CooldownScope, MatchMode, ReplyMode, R, S, W
from .types import (
    Action,
    AllowedMentions,
    MentionPolicy,
    MessageContext,
    OutboundAction,
    Rule,
    RuleSet,
    Settings,
    Where,
)

__all__ = [
    # Constants
    "CooldownScope",
    "MatchMode",
    "ReplyMode",
    "R",
    "S",
    "W",
    # Types
    "Action",
    "AllowedMentions",
    "MentionPolicy",
    "MessageContext",
    "OutboundAction",
    "Rule",
    "RuleSet",
    "Settings",
    "Where",
]
