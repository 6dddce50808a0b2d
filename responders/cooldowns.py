"""
Per-rule cooldown tracking.

Each engine owns its own tracker, so independent engines never share
cooldown state.
"""
from __future__ import annotations

import time
from typing import Callable, Dict, Optional, Tuple

from core.constants import DM_BUCKET, CooldownScope
from core.types import MessageContext, Rule

CooldownKey = Tuple[str, str, str]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class CooldownTracker:
    """Remembers when each (rule, scope, bucket) last fired."""

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self.clock = clock or monotonic_ms
        self.last_fired: Dict[CooldownKey, float] = {}

    def __len__(self) -> int:
        return len(self.last_fired)

    @staticmethod
    def bucket_for(rule: Rule, ctx: MessageContext) -> str:
        if rule.per == CooldownScope.GUILD:
            return ctx.guild_id or DM_BUCKET
        if rule.per == CooldownScope.CHANNEL:
            return ctx.channel_id
        return ctx.author_id

    def key_for(self, rule: Rule, ctx: MessageContext) -> CooldownKey:
        return (rule.id, rule.per, self.bucket_for(rule, ctx))

    def try_acquire(self, rule: Rule, ctx: MessageContext) -> bool:
        """
        Check whether the rule may fire for this message and, if so, record it.

        Rules with no cooldown always pass but are still recorded.
        """
        key = self.key_for(rule, ctx)
        now = self.clock()

        if rule.cooldown_ms > 0:
            last = self.last_fired.get(key)
            if last is not None and now - last < rule.cooldown_ms:
                return False

        self.last_fired[key] = now
        return True
