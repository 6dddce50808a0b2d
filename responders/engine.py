"""
Auto-responder engine - main entry point and orchestration.

This module ties together config loading, matching, cooldowns and rendering.
Delivery is handed off to a caller-supplied coroutine.
"""
from __future__ import annotations

import logging
import os
import random
from pathlib import Path
from typing import Awaitable, Callable, Dict, NamedTuple, Optional

from core.types import MentionPolicy, MessageContext, OutboundAction, Rule, RuleSet, Settings
from core.utils import clamp_text, contains_url, word_count

from .config_loader import load_rules_file, normalize_config
from .cooldowns import CooldownTracker
from .matching import Matcher, build_matchers, passes_where, within_word_bounds
from .rendering import pick_reply, render_template

logger = logging.getLogger("autoreply.responder")

Deliver = Callable[[OutboundAction], Awaitable[object]]


class _Snapshot(NamedTuple):
    rule_set: RuleSet
    matchers: Dict[str, Matcher]


class AutoResponderEngine:
    """
    Evaluates incoming messages against the published rule set.

    The rule set and its compiled matchers are published together as one
    snapshot; ``reload`` builds a new snapshot and swaps it in a single
    assignment, so an evaluation never sees a half-loaded configuration.
    """

    def __init__(
        self,
        rule_set: Optional[RuleSet] = None,
        *,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.cooldowns = CooldownTracker(clock)
        self._snapshot = self._compile(rule_set or RuleSet())

    @staticmethod
    def _compile(rule_set: RuleSet) -> _Snapshot:
        return _Snapshot(rule_set, build_matchers(rule_set.rules))

    @property
    def rule_set(self) -> RuleSet:
        return self._snapshot.rule_set

    @property
    def settings(self) -> Settings:
        return self._snapshot.rule_set.settings

    # ─── Reload ───────────────────────────────────────────────────────────────

    def publish(self, rule_set: RuleSet) -> RuleSet:
        self._snapshot = self._compile(rule_set)
        return rule_set

    def reload(self, data: object) -> RuleSet:
        """
        Replace the active rules with a freshly normalized document.

        Raises ConfigError for an unusable document; the previous rules stay
        active in that case.
        """
        rule_set = self.publish(normalize_config(data, self.rng))
        logger.info("Rules reloaded: %s rule(s)", len(rule_set))
        return rule_set

    async def reload_from_file(self, path: Path) -> RuleSet:
        data = await load_rules_file(path)
        return self.reload(data)

    # ─── Evaluation ───────────────────────────────────────────────────────────

    @staticmethod
    def is_ignored(settings: Settings, ctx: MessageContext) -> bool:
        """Message-level checks applied once before any rule."""
        if settings.ignore_bots and ctx.author_is_bot:
            return True
        if settings.ignore_dms and ctx.is_dm:
            return True

        content = ctx.content or ""
        if not content.strip():
            return True
        if any(content.startswith(prefix) for prefix in settings.ignore_prefixes):
            return True
        if settings.ignore_urls and contains_url(content):
            return True
        return False

    def evaluate(self, ctx: MessageContext) -> Optional[OutboundAction]:
        """
        Pick the first rule that fires for a message and render its reply.

        Returns None when nothing fires. A returned action has already
        consumed the rule's cooldown.
        """
        snapshot = self._snapshot
        settings = snapshot.rule_set.settings

        if self.is_ignored(settings, ctx):
            return None

        content = clamp_text(ctx.content, settings.max_message_length)
        words = word_count(content)

        for rule in snapshot.rule_set.rules:
            if not rule.enabled:
                continue
            if not within_word_bounds(rule, words):
                continue
            if not passes_where(rule.where, ctx):
                continue
            matcher = snapshot.matchers.get(rule.id)
            if matcher is None or not matcher(content):
                continue
            if not self.cooldowns.try_acquire(rule, ctx):
                continue

            if settings.log_matches:
                logger.info(
                    "[match] rule=%s user=%s channel=%s",
                    rule.id,
                    ctx.author_id,
                    ctx.channel_id,
                )
            return self.build_action(rule, ctx)

        return None

    def build_action(self, rule: Rule, ctx: MessageContext) -> Optional[OutboundAction]:
        template = pick_reply(rule.action.replies, self.rng)
        if template is None:
            return None

        action = rule.action
        mentions = MentionPolicy(
            user_ids=(ctx.author_id,) if action.allowed_mentions.users else (),
            roles=action.allowed_mentions.roles,
            everyone=action.allowed_mentions.everyone,
            replied_user=action.mention_author,
        )
        return OutboundAction(
            rule_id=rule.id,
            mode=action.mode,
            content=render_template(template, ctx),
            mentions=mentions,
            delete_trigger_message=action.delete_trigger_message,
        )

    async def process(self, ctx: MessageContext, deliver: Deliver) -> bool:
        """
        Evaluate a message and deliver the reply, if any.

        Delivery errors are logged and swallowed; the cooldown stays consumed.
        Returns True when an action was handed to ``deliver`` without error.
        """
        action = self.evaluate(ctx)
        if action is None:
            return False

        if self.settings.log_matches:
            logger.info(
                "[send_attempt] pid=%s rule=%s msg=%s",
                os.getpid(),
                action.rule_id,
                ctx.message_id,
            )

        try:
            await deliver(action)
        except Exception as e:
            logger.warning("Failed to deliver rule %s for message %s: %s", action.rule_id, ctx.message_id, e)
            return False
        return True
