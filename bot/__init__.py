"""Bot package - Discord client wiring for the auto-responder."""
from .client import AutoReplyBot

__all__ = ["AutoReplyBot"]
