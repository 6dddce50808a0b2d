"""
Trigger matching logic for auto-responder.

Handles the different match modes and the allow/deny scope filter.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Iterable

from core.constants import MatchMode
from core.types import MessageContext, Rule, Where

logger = logging.getLogger("autoreply.responder")

Matcher = Callable[[str], bool]


def wildcard_to_regex(pattern: str, case_insensitive: bool) -> re.Pattern[str]:
    """
    Compile a wildcard trigger.

    ``*`` matches any run of characters, everything else is literal. The
    result is meant for ``fullmatch``.
    """
    escaped = ".*".join(re.escape(part) for part in pattern.split("*"))
    flags = re.DOTALL
    if case_insensitive:
        flags |= re.IGNORECASE
    return re.compile(escaped, flags)


def _never(_content: str) -> bool:
    return False


def build_matcher(rule: Rule) -> Matcher:
    """
    Build a predicate for a rule; it matches if any trigger matches.

    Supports modes:
    - exact / contains / startsWith / endsWith: plain string tests, lowercased
      when the rule is case-insensitive
    - wildcard: whole-text match with ``*`` as the only metacharacter
    - regex: each trigger is a regex searched anywhere in the text
    """
    triggers = rule.triggers

    if rule.match == MatchMode.REGEX:
        flags = re.IGNORECASE if rule.case_insensitive else 0
        try:
            patterns = [re.compile(trigger, flags) for trigger in triggers]
        except re.error as e:
            logger.warning("Rule %s has an invalid regex trigger, disabling it: %s", rule.id, e)
            return _never
        return lambda content: any(pattern.search(content) for pattern in patterns)

    if rule.match == MatchMode.WILDCARD:
        patterns = [wildcard_to_regex(trigger, rule.case_insensitive) for trigger in triggers]
        return lambda content: any(pattern.fullmatch(content) for pattern in patterns)

    fold = rule.case_insensitive
    needles = [trigger.lower() if fold else trigger for trigger in triggers]

    if rule.match == MatchMode.EXACT:
        test: Callable[[str, str], bool] = lambda haystack, needle: haystack == needle
    elif rule.match == MatchMode.CONTAINS:
        test = lambda haystack, needle: needle in haystack
    elif rule.match == MatchMode.STARTSWITH:
        test = lambda haystack, needle: haystack.startswith(needle)
    elif rule.match == MatchMode.ENDSWITH:
        test = lambda haystack, needle: haystack.endswith(needle)
    else:
        logger.warning("Rule %s has unknown match mode %r", rule.id, rule.match)
        return _never

    def _match(content: str) -> bool:
        haystack = content.lower() if fold else content
        return any(test(haystack, needle) for needle in needles)

    return _match


def build_matchers(rules: Iterable[Rule]) -> Dict[str, Matcher]:
    """Compile every rule once; the table is keyed by rule id."""
    return {rule.id: build_matcher(rule) for rule in rules}


def passes_where(where: Where, ctx: MessageContext) -> bool:
    """
    Check a message against a rule's scope filter.

    Deny lists win over allow lists; an empty allow list places no
    restriction on its dimension.
    """
    if ctx.channel_id in where.deny_channels:
        return False
    if ctx.author_id in where.deny_users:
        return False
    if where.deny_roles and not where.deny_roles.isdisjoint(ctx.role_ids):
        return False

    if where.allow_channels and ctx.channel_id not in where.allow_channels:
        return False
    if where.allow_users and ctx.author_id not in where.allow_users:
        return False
    if where.allow_roles and where.allow_roles.isdisjoint(ctx.role_ids):
        return False

    return True


def within_word_bounds(rule: Rule, words: int) -> bool:
    if rule.min_words is not None and words < rule.min_words:
        return False
    if rule.max_words is not None and words > rule.max_words:
        return False
    return True
