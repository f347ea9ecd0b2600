"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_proxy
from core.config import Config
from core.headers import HeaderPolicy
from core.protocols import RequestLogger
from core.rewrite import RequestRewriter
from services.relay_service import RelayService
from services.upstream import UpstreamClient

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    policy = HeaderPolicy.from_settings(config.headers)
    # Built eagerly so a bad origin fails at startup, not on first request.
    rewriter = RequestRewriter(config.origin, policy)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = config.upstream
        limits = httpx.Limits(
            max_connections=settings.max_connections,
            max_keepalive_connections=settings.max_keepalive_connections,
        )
        timeout = httpx.Timeout(settings.timeout, connect=settings.connect_timeout)
        origin_client = httpx.AsyncClient(timeout=timeout, limits=limits, transport=transport)
        upstream = UpstreamClient(origin_client, timeout)
        app.state.relay_service = RelayService(
            rewriter=rewriter,
            upstream=upstream,
            policy=policy,
            logger=logger,
        )
        try:
            yield
        finally:
            await upstream.aclose()

    # Every path belongs to the origin, so FastAPI's own doc routes are disabled.
    app = FastAPI(
        title="Host Rewrite Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.api_route("/{path:path}", methods=PROXY_METHODS)
    async def proxy_all(request: Request, path: str):
        return await handle_proxy(request)

    return app
