"""
HTTP routes for the Meta OAuth flow and service status.
"""

from __future__ import annotations

import html
import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from meta_ads_mcp.clients.meta_auth import TokenExchangeError
from meta_ads_mcp.core.config import AppSettings
from meta_ads_mcp.dependencies import get_app_settings, get_oauth_flow
from meta_ads_mcp.schemas import DisconnectRequest, DisconnectResponse, OAuthErrorResponse
from meta_ads_mcp.services.oauth_flow import (
    ConnectionSummary,
    OAuthFlowController,
    OAuthProtocolError,
)
from meta_ads_mcp.tools.dispatcher import SERVER_NAME, SERVER_VERSION

router = APIRouter()
logger = logging.getLogger(__name__)

ENDPOINTS = {
    "sse": "/sse",
    "mcp": "/mcp",
    "oauth_start": "/auth/meta?user_id=YOUR_USER_ID",
    "oauth_callback": "/auth/callback",
    "disconnect": "/auth/disconnect",
}

_MAX_LISTED_ACCOUNTS = 5


def _render_connected_page(summary: ConnectionSummary) -> str:
    accounts = "".join(
        f'<div class="account">{html.escape(resource.display_name)}</div>'
        for resource in summary.linked_resources[:_MAX_LISTED_ACCOUNTS]
    )
    return f"""<!DOCTYPE html>
<html>
<head>
  <title>Meta Ads Connected</title>
  <style>
    body {{ font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; display: flex;
           justify-content: center; align-items: center; height: 100vh; margin: 0;
           background: #f0f2f5; }}
    .container {{ background: white; padding: 3rem; border-radius: 12px; text-align: center;
                 max-width: 500px; box-shadow: 0 20px 60px rgba(0, 0, 0, 0.15); }}
    .accounts {{ background: #f7fafc; padding: 1rem; border-radius: 8px; text-align: left; }}
    .account {{ padding: 0.5rem; border-bottom: 1px solid #e2e8f0; }}
    .account:last-child {{ border-bottom: none; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>Successfully Connected!</h1>
    <p>Your Meta Ads account has been connected.</p>
    <div class="accounts">
      <strong>Found {len(summary.linked_resources)} Ad Account(s):</strong>
      {accounts}
    </div>
    <p>Token expires in {summary.expires_in_days} days</p>
    <button onclick="window.close()">Close Window</button>
  </div>
</body>
</html>
"""


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(settings: Annotated[AppSettings, Depends(get_app_settings)]) -> dict:
    """Simple health endpoint for monitoring."""
    return {
        "status": "healthy",
        "server": SERVER_NAME,
        "version": SERVER_VERSION,
        "meta_app_configured": bool(settings.meta.app_id and settings.meta.app_secret),
        "endpoints": ENDPOINTS,
    }


@router.get("/", status_code=HTTPStatus.OK)
async def service_index() -> dict:
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "description": "Self-hosted Meta Ads MCP server with OAuth support",
        "endpoints": [
            {"path": "/health", "method": "GET", "description": "Health check"},
            {"path": "/sse", "method": "GET", "description": "MCP SSE endpoint"},
            {"path": "/mcp", "method": "POST", "description": "MCP standard endpoint"},
            {"path": "/auth/meta?user_id=YOUR_ID", "method": "GET", "description": "Start OAuth flow"},
            {"path": "/auth/callback", "method": "GET", "description": "OAuth callback"},
            {"path": "/auth/disconnect", "method": "POST", "description": "Disconnect account"},
        ],
    }


@router.get("/auth/meta")
async def start_meta_oauth_flow(
    flow: Annotated[OAuthFlowController, Depends(get_oauth_flow)],
    user_id: str = Query(
        "default-user", min_length=1, description="User identifier initiating authentication."
    ),
) -> RedirectResponse:
    """Redirect the browser to the Meta consent dialog."""
    authorization_url = await flow.start(user_id)
    return RedirectResponse(url=authorization_url, status_code=HTTPStatus.FOUND)


@router.get("/auth/callback")
async def handle_meta_oauth_callback(
    flow: Annotated[OAuthFlowController, Depends(get_oauth_flow)],
    code: str | None = Query(default=None),
    state: str | None = Query(default=None),
    error: str | None = Query(default=None),
    error_description: str | None = Query(default=None),
) -> Response:
    """Complete the OAuth exchange and show a confirmation page."""
    try:
        summary = await flow.complete(
            code=code,
            state=state,
            error=error,
            error_description=error_description,
        )
    except OAuthProtocolError as exc:
        body = OAuthErrorResponse(error=exc.reason, message=exc.message)
        return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content=body.model_dump())
    except TokenExchangeError as exc:
        body = OAuthErrorResponse(error="token_exchange_failed", message=str(exc))
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR, content=body.model_dump()
        )

    return HTMLResponse(_render_connected_page(summary))


@router.post("/auth/disconnect", response_model=DisconnectResponse)
async def disconnect_meta_account(
    payload: DisconnectRequest,
    flow: Annotated[OAuthFlowController, Depends(get_oauth_flow)],
) -> DisconnectResponse:
    """Remove the stored credential for a user."""
    existed = await flow.disconnect(payload.user_id)
    message = "Account disconnected" if existed else "No connected account found"
    return DisconnectResponse(success=existed, message=message)


__all__ = ["router"]
