"""
FastAPI application entrypoint for the Meta Ads MCP server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meta_ads_mcp.api.routes import router as api_router
from meta_ads_mcp.core.config import get_settings
from meta_ads_mcp.core.logging import configure_logging
from meta_ads_mcp.dependencies import get_tool_dispatcher
from meta_ads_mcp.tools import create_mcp_server
from meta_ads_mcp.tools.dispatcher import SERVER_NAME, SERVER_VERSION


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    mcp_server = create_mcp_server(get_tool_dispatcher(), host=settings.host)
    streamable_app = mcp_server.streamable_http_app()
    sse_app = mcp_server.sse_app()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        async with mcp_server.session_manager.run():
            yield

    app = FastAPI(
        title=SERVER_NAME,
        version=SERVER_VERSION,
        description="Meta Marketing API tools over MCP, with per-user OAuth.",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.include_router(api_router)
    # /mcp, /sse and /messages/ are served by the MCP SDK.
    app.router.routes.extend(streamable_app.routes)
    app.router.routes.extend(sse_app.routes)
    app.state.mcp_server = mcp_server
    return app


app = create_app()


def run() -> None:
    """Console entry point serving the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


__all__ = ["app", "create_app", "run"]
