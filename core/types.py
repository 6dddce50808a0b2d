"""
Type definitions and dataclasses for the auto-reply bot.

Rules and settings are frozen once built so a published rule set can be
shared by every in-flight evaluation without copying.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from .constants import CooldownScope, MatchMode, ReplyMode


@dataclass(frozen=True)
class Settings:
    """Process-wide settings from the ``settings`` object."""
    reply_mode_default: str = ReplyMode.REPLY
    ignore_bots: bool = True
    ignore_dms: bool = True
    ignore_prefixes: Tuple[str, ...] = ()
    ignore_urls: bool = False
    default_cooldown_ms: float = 3000
    max_message_length: int = 4000
    log_matches: bool = False


@dataclass(frozen=True)
class Where:
    """Allow/deny lists restricting where a rule applies."""
    allow_channels: FrozenSet[str] = frozenset()
    deny_channels: FrozenSet[str] = frozenset()
    allow_roles: FrozenSet[str] = frozenset()
    deny_roles: FrozenSet[str] = frozenset()
    allow_users: FrozenSet[str] = frozenset()
    deny_users: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class AllowedMentions:
    """Which mention kinds a rendered reply may ping."""
    users: bool = True
    roles: bool = False
    everyone: bool = False


@dataclass(frozen=True)
class Action:
    """What a rule does when it fires."""
    mode: str = ReplyMode.REPLY
    mention_author: bool = True
    allowed_mentions: AllowedMentions = field(default_factory=AllowedMentions)
    delete_trigger_message: bool = False
    replies: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Rule:
    """A normalized trigger -> reply mapping."""
    id: str
    triggers: Tuple[str, ...]
    action: Action
    enabled: bool = True
    case_insensitive: bool = True
    min_words: Optional[float] = None
    max_words: Optional[float] = None
    cooldown_ms: float = 0
    per: str = CooldownScope.USER
    match: str = MatchMode.WILDCARD
    where: Where = field(default_factory=Where)


@dataclass(frozen=True)
class RuleSet:
    """Ordered rules plus the settings they were loaded with."""
    settings: Settings = field(default_factory=Settings)
    rules: Tuple[Rule, ...] = ()

    def __len__(self) -> int:
        return len(self.rules)


@dataclass(frozen=True)
class MessageContext:
    """
    Platform-neutral view of an incoming message.

    ``guild_id`` is None for direct messages; ``role_ids`` is empty outside
    guilds.
    """
    message_id: str
    author_id: str
    channel_id: str
    content: str = ""
    author_name: str = ""
    author_is_bot: bool = False
    guild_id: Optional[str] = None
    role_ids: FrozenSet[str] = frozenset()

    @property
    def is_dm(self) -> bool:
        return self.guild_id is None


@dataclass(frozen=True)
class MentionPolicy:
    """Resolved mention allow-list for one outgoing message."""
    user_ids: Tuple[str, ...] = ()
    roles: bool = False
    everyone: bool = False
    replied_user: bool = False


@dataclass(frozen=True)
class OutboundAction:
    """A rendered reply ready to be handed to the delivery layer."""
    rule_id: str
    mode: str
    content: str
    mentions: MentionPolicy = field(default_factory=MentionPolicy)
    delete_trigger_message: bool = False
