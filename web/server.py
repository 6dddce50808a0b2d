"""
Health-check HTTP server.
Uses aiohttp for async web serving.
"""
import logging

from aiohttp import web

logger = logging.getLogger("autoreply.web")


class HealthCheckServer:
    """Small HTTP server reporting bot readiness and loaded rules."""

    def __init__(self, bot, host="0.0.0.0", port=8080):
        """
        Initialize health server.

        Args:
            bot: AutoReplyBot instance (needs is_ready, latency and engine)
            host: Host to bind to
            port: Port to listen on
        """
        self.bot = bot
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner = None

        self._setup_routes()

    def _setup_routes(self):
        """Set up all web routes."""
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/ping", self.handle_ping)

    async def handle_health(self, request):
        """Report readiness; 503 until the gateway connection is ready."""
        rules = len(self.bot.engine.rule_set)
        if self.bot.is_ready():
            return web.json_response({
                "status": "healthy",
                "bot_ready": True,
                "latency_ms": round(self.bot.latency * 1000, 2),
                "rules": rules,
            })
        return web.json_response({
            "status": "starting",
            "bot_ready": False,
            "rules": rules,
        }, status=503)

    async def handle_ping(self, request):
        return web.Response(text="pong")

    async def start(self):
        """Start the web server."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()
        logger.info("Health server started at http://%s:%s", self.host, self.port)

    async def stop(self):
        """Stop the web server."""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            logger.info("Health server stopped")
