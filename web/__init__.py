"""
Web package for the auto-reply bot.

Provides the aiohttp health-check endpoint used by process supervisors.
"""

from web.server import HealthCheckServer

__all__ = ['HealthCheckServer']
