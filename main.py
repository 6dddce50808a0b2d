"""
Main entry point for the auto-reply bot.

Loads configuration from environment, loads the rules file and starts the bot.
"""
from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from discord.errors import PrivilegedIntentsRequired

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

# Import after .env is loaded so core.config reads the right environment.
from bot import AutoReplyBot
from core.config import BOT_TOKEN, LOG_LEVEL, RULES_PATH, ConfigError
from responders.engine import AutoResponderEngine

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("autoreply")

# Suppress verbose gateway logs unless LOG_LEVEL is DEBUG
if LOG_LEVEL.upper() != "DEBUG":
    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

if not env_path.exists():
    logger.warning(".env file not found at %s", env_path)


async def main() -> int:
    token = BOT_TOKEN
    if not token:
        logger.error("Missing bot token. Set DISCORD_BOT_TOKEN in .env or environment.")
        return 1

    engine = AutoResponderEngine()
    try:
        await engine.reload_from_file(RULES_PATH)
    except ConfigError as e:
        logger.error("Cannot load rules: %s", e)
        return 1

    bot = AutoReplyBot(engine, RULES_PATH)
    try:
        await bot.start(token)
    except PrivilegedIntentsRequired:
        logger.error(
            "Privileged intents required. Enable the MESSAGE CONTENT intent "
            "in the Discord developer portal."
        )
        await bot.close()
        return 1
    except Exception as e:
        logger.error("Failed to start bot: %s", e)
        await bot.close()
        raise
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass
