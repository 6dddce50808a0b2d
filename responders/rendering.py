"""
Reply selection and template rendering.
"""
from __future__ import annotations

import random
from typing import Optional, Sequence

from core.types import MessageContext


def mention_for(user_id: str) -> str:
    return f"<@{user_id}>"


def render_template(template: str, ctx: MessageContext) -> str:
    """
    Substitute the known placeholders in a reply template.

    ``{mention}``, ``{username}``, ``{userid}`` and ``{content}`` are replaced
    everywhere they occur; any other ``{token}`` is left as written.
    """
    return (
        template.replace("{mention}", mention_for(ctx.author_id))
        .replace("{username}", ctx.author_name or "")
        .replace("{userid}", ctx.author_id)
        .replace("{content}", ctx.content or "")
    )


def pick_reply(replies: Sequence[str], rng: Optional[random.Random] = None) -> Optional[str]:
    if not replies:
        return None
    return (rng or random).choice(list(replies))
