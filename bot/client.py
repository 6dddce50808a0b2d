"""
Discord bot client - lean event handling.

Messages are handed to the auto-responder engine; the rules file is watched
for changes while the bot runs.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import discord

from core.config import HEALTH_HOST, HEALTH_PORT, RULES_POLL_SECONDS
from responders.delivery import context_from_message, deliver_to
from responders.engine import AutoResponderEngine
from responders.watcher import RulesWatcher
from web.server import HealthCheckServer

logger = logging.getLogger("autoreply")


class AutoReplyBot(discord.Client):
    """
    Main Discord bot client.

    Handles:
    - Discord events (on_ready, on_message)
    - Rules hot reload
    - Optional health-check server
    """

    def __init__(
        self,
        engine: AutoResponderEngine,
        rules_path: Path,
        health_port: Optional[int] = HEALTH_PORT,
    ) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.guild_messages = True
        intents.message_content = True
        super().__init__(intents=intents)

        self.engine = engine
        self.watcher = RulesWatcher(engine, rules_path, interval=RULES_POLL_SECONDS)
        self.health: Optional[HealthCheckServer] = None
        if health_port is not None:
            self.health = HealthCheckServer(self, host=HEALTH_HOST, port=health_port)
        self.ready_once = False

    # ─── Lifecycle ────────────────────────────────────────────────────────────

    async def setup_hook(self) -> None:
        """Called when the bot is starting up."""
        await self.watcher.prime()
        self.watcher.start()
        if self.health:
            await self.health.start()

    async def on_ready(self) -> None:
        """Called when the bot is ready."""
        if self.ready_once:
            return
        self.ready_once = True
        logger.info("Bot ready as %s", self.user)
        logger.info("Process ID: %s", os.getpid())
        logger.info("In %s guild(s), %s rule(s) loaded", len(self.guilds), len(self.engine.rule_set))

    async def close(self) -> None:
        """Cleanup when shutting down."""
        await self.watcher.stop()
        if self.health:
            await self.health.stop()
        await super().close()

    # ─── Message Events ───────────────────────────────────────────────────────

    async def on_message(self, message: discord.Message) -> None:
        """Handle incoming messages."""
        if self.user is not None and message.author.id == self.user.id:
            return

        await self.engine.process(context_from_message(message), deliver_to(message))
