"""HTTP server exposing the batch engine.

``POST /batch`` takes a JSON body holding a batch template under
``"template"``. The incoming request itself is the batch's original
request, so templates can read the posted payload from
``$.original.body``.
"""

import asyncio
import json
import logging
from typing import Any, Optional

from aiohttp import web

from .config import parse_batch_template
from .context import serialize
from .engine import BatchEngine
from .errors import ConfigError, DispatchError, JsonBatchError
from .models import Headers, Request, Response
from .types import load_json

logger = logging.getLogger(__name__)


def _error_response(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _incoming_headers(request: web.Request) -> Headers:
    headers: Headers = {}
    for key, value in request.headers.items():
        headers.setdefault(key, []).append(value)
    return headers


class BatchServer:
    """Async HTTP server running batch templates on request."""

    DEFAULT_PORT = 7431

    def __init__(
        self, engine: BatchEngine, port: int = DEFAULT_PORT, host: str = "127.0.0.1"
    ) -> None:
        self.engine = engine
        self.port = port
        self.host = host
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None

        self._setup_routes()

    def _setup_routes(self) -> None:
        """Configure HTTP routes."""
        self.app.router.add_post("/batch", self.handle_batch)
        self.app.router.add_get("/health", self.handle_health)

    async def start(self) -> None:
        """Start the HTTP server."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            self.site = None

    async def handle_batch(self, request: web.Request) -> web.Response:
        """Handle POST /batch - run a batch template.

        Returns the final batch response, 400 for invalid templates or
        evaluation errors, and 502 when a step could not be dispatched.
        """
        try:
            payload: Any = await request.json(loads=load_json)
        except json.JSONDecodeError as e:
            return _error_response(400, f"Invalid JSON body: {e}")

        if not isinstance(payload, dict) or "template" not in payload:
            return _error_response(400, "Request body must contain a 'template' object")

        try:
            template = parse_batch_template(payload["template"], "template")
        except ConfigError as e:
            return _error_response(400, str(e))

        original = Request(
            http_method=request.method,
            url=str(request.url),
            headers=_incoming_headers(request),
            body=payload,
        )

        # The engine blocks on every dispatch; keep it off the event loop
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(
                None, self.engine.execute, original, template
            )
        except DispatchError as e:
            logger.warning("Batch dispatch failed: %s", e)
            return _error_response(502, str(e))
        except JsonBatchError as e:
            logger.warning("Batch failed: %s", e)
            return _error_response(400, str(e))

        return self._to_web_response(result)

    async def handle_health(self, request: web.Request) -> web.Response:
        """Handle GET /health - health check endpoint."""
        return web.Response(text="ok")

    def _to_web_response(self, result: Response) -> web.Response:
        response = web.Response(
            status=result.status or 200,
            text=serialize(result.body),
            content_type="application/json",
        )
        for key, values in (result.headers or {}).items():
            if key.lower() == "content-type":
                if values:
                    response.headers["Content-Type"] = values[0]
                continue
            for value in values:
                response.headers.add(key, value)
        return response


def run_server(
    engine: BatchEngine, port: int = BatchServer.DEFAULT_PORT, host: str = "127.0.0.1"
) -> None:
    """Serve until interrupted."""
    server = BatchServer(engine, port=port, host=host)
    web.run_app(server.app, host=host, port=port, print=None)
