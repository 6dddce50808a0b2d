"""
Response delivery for auto-responder.

Translates between discord.py messages and the engine's platform-neutral
types, and performs the actual send/reply with permission checks.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Awaitable, Optional

import discord

from core.constants import ReplyMode
from core.types import MentionPolicy, MessageContext, OutboundAction

logger = logging.getLogger("autoreply.responder")


def context_from_message(message: discord.Message) -> MessageContext:
    """Build the engine's view of a discord.py message."""
    author = message.author
    guild = message.guild
    roles = getattr(author, "roles", None) if guild is not None else None
    role_ids = frozenset(str(role.id) for role in roles or [])

    return MessageContext(
        message_id=str(message.id),
        author_id=str(author.id),
        author_name=getattr(author, "name", "") or "",
        author_is_bot=bool(author.bot),
        content=message.content or "",
        channel_id=str(message.channel.id),
        guild_id=str(guild.id) if guild is not None else None,
        role_ids=role_ids,
    )


def build_allowed_mentions(policy: MentionPolicy) -> discord.AllowedMentions:
    users: Any = [discord.Object(id=int(uid)) for uid in policy.user_ids if uid.isdigit()]
    return discord.AllowedMentions(
        everyone=policy.everyone,
        roles=policy.roles,
        users=users or False,
        replied_user=policy.replied_user,
    )


def _bot_permissions(message: discord.Message) -> Optional[discord.Permissions]:
    """Permissions of the bot in the message's channel, None outside guilds."""
    guild = message.guild
    me = guild.me if guild is not None else None
    if me is None:
        return None
    return message.channel.permissions_for(me)


async def send_action(message: discord.Message, action: OutboundAction) -> bool:
    """
    Deliver a rendered action in response to ``message``.

    Returns False without sending when the bot cannot see or write to the
    channel. HTTP errors from the send itself propagate to the caller.
    """
    perms = _bot_permissions(message)
    if perms is not None and not (perms.view_channel and perms.send_messages):
        logger.debug("Missing send permissions in channel %s", message.channel.id)
        return False

    allowed_mentions = build_allowed_mentions(action.mentions)

    if action.mode == ReplyMode.SEND:
        await message.channel.send(content=action.content, allowed_mentions=allowed_mentions)
    else:
        await message.reply(
            content=action.content,
            allowed_mentions=allowed_mentions,
            mention_author=action.mentions.replied_user,
        )

    if action.delete_trigger_message:
        await _delete_trigger(message)
    return True


async def _delete_trigger(message: discord.Message) -> None:
    perms = _bot_permissions(message)
    if perms is None or not perms.manage_messages:
        return
    try:
        await message.delete()
    except discord.HTTPException as e:
        logger.debug("Could not delete trigger message %s: %s", message.id, e)


def deliver_to(message: discord.Message) -> Callable[[OutboundAction], Awaitable[bool]]:
    """Bind ``send_action`` to one message for ``AutoResponderEngine.process``."""

    async def _deliver(action: OutboundAction) -> bool:
        return await send_action(message, action)

    return _deliver
