"""
Configuration key constants.

Using constants instead of string literals provides:
- IDE autocomplete
- Typo protection (caught at import time)
- Single source of truth for key names
"""
from __future__ import annotations


class SettingKey:
    """Raw keys of the ``settings`` object in the rules file."""

    REPLY_MODE_DEFAULT = "replyModeDefault"
    IGNORE_BOTS = "ignoreBots"
    IGNORE_DMS = "ignoreDMs"
    IGNORE_PREFIXES = "ignorePrefixes"
    IGNORE_URLS = "ignoreURLs"
    DEFAULT_COOLDOWN_MS = "defaultCooldownMs"
    MAX_MESSAGE_LENGTH = "maxMessageLength"
    LOG_MATCHES = "logMatches"


class RuleKey:
    """Raw keys of a rule object in the rules file."""

    ID = "id"
    ENABLED = "enabled"
    CASE_INSENSITIVE = "caseInsensitive"
    MIN_WORDS = "minWords"
    MAX_WORDS = "maxWords"
    COOLDOWN_MS = "cooldownMs"
    PER = "per"
    MATCH = "match"
    TRIGGERS = "triggers"
    ENTRIES = "entries"
    WHERE = "where"
    ACTION = "action"

    # Entry and action fields
    REPLIES = "replies"
    MODE = "mode"
    MENTION_AUTHOR = "mentionAuthor"
    ALLOWED_MENTIONS = "allowedMentions"
    DELETE_TRIGGER_MESSAGE = "deleteTriggerMessage"


class WhereKey:
    """Raw keys of a rule's ``where`` scope filter."""

    ALLOW_CHANNELS = "allowChannels"
    DENY_CHANNELS = "denyChannels"
    ALLOW_ROLES = "allowRoles"
    DENY_ROLES = "denyRoles"
    ALLOW_USERS = "allowUsers"
    DENY_USERS = "denyUsers"


class MatchMode:
    """Matching modes for auto-responder triggers."""
    EXACT = "exact"
    CONTAINS = "contains"
    STARTSWITH = "startsWith"
    ENDSWITH = "endsWith"
    WILDCARD = "wildcard"
    REGEX = "regex"

    ALL = (EXACT, CONTAINS, STARTSWITH, ENDSWITH, WILDCARD, REGEX)


class CooldownScope:
    """Partitioning of cooldown buckets."""
    USER = "user"
    CHANNEL = "channel"
    GUILD = "guild"

    ALL = (USER, CHANNEL, GUILD)


class ReplyMode:
    """Delivery modes for a rule's action."""
    REPLY = "reply"
    SEND = "send"

    ALL = (REPLY, SEND)


# Bucket used for guild-scoped cooldowns in direct messages
DM_BUCKET = "dm"

# Shorthand aliases for cleaner imports
S = SettingKey
R = RuleKey
W = WhereKey
