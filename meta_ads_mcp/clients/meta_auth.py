"""
Meta OAuth utilities.

These helpers build the consent dialog URL and run both token exchanges:
authorization code to short-lived token, then short-lived to long-lived.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from meta_ads_mcp.clients.meta_api import GRAPH_BASE_URL
from meta_ads_mcp.core.config import MetaSettings

# Meta documents long-lived user tokens as valid for about 60 days.
LONG_LIVED_TOKEN_SECONDS = 60 * 24 * 60 * 60


class TokenExchangeError(Exception):
    """Raised when a token exchange or the follow-up account fetch fails."""


@dataclass(frozen=True)
class TokenGrant:
    """Access token returned by the token endpoint."""

    access_token: str
    expires_in: int
    token_type: str = "bearer"


class MetaOAuthClient:
    """Build Meta authorization URLs and exchange authorization codes."""

    DIALOG_BASE_URL = "https://www.facebook.com"

    def __init__(
        self,
        meta_settings: MetaSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._meta = meta_settings
        self._transport = transport

    @property
    def token_url(self) -> str:
        return f"{GRAPH_BASE_URL}/{self._meta.api_version}/oauth/access_token"

    def build_authorization_url(self, state: str) -> str:
        """Construct the Meta OAuth consent URL."""
        params = {
            "client_id": self._meta.app_id,
            "redirect_uri": str(self._meta.redirect_uri),
            "scope": self._meta.oauth_scope,
            "state": state,
            "response_type": "code",
        }
        query = urlencode(params)
        return f"{self.DIALOG_BASE_URL}/{self._meta.api_version}/dialog/oauth?{query}"

    async def exchange_authorization_code(self, code: str) -> TokenGrant:
        """Exchange an authorization code for a short-lived user token."""
        params = {
            "client_id": self._meta.app_id,
            "client_secret": self._meta.app_secret,
            "redirect_uri": str(self._meta.redirect_uri),
            "code": code,
        }
        payload = await self._fetch_token(params, failure="OAuth token exchange failed")
        return self._to_grant(payload, failure="OAuth token exchange failed")

    async def exchange_long_lived_token(self, short_lived_token: str) -> TokenGrant:
        """Upgrade a short-lived token to a long-lived one."""
        params = {
            "grant_type": "fb_exchange_token",
            "client_id": self._meta.app_id,
            "client_secret": self._meta.app_secret,
            "fb_exchange_token": short_lived_token,
        }
        failure = "Long-lived token exchange failed"
        payload = await self._fetch_token(params, failure=failure)
        return self._to_grant(payload, failure=failure, default_expiry=LONG_LIVED_TOKEN_SECONDS)

    async def _fetch_token(self, params: Dict[str, str], *, failure: str) -> Dict[str, Any]:
        async with httpx.AsyncClient(
            timeout=self._meta.http_timeout, transport=self._transport
        ) as client:
            response = await client.get(self.token_url, params=params)

        if not response.is_success:
            raise TokenExchangeError(f"{failure}: {response.text}")

        try:
            return response.json()
        except ValueError as exc:
            raise TokenExchangeError(f"{failure}: {response.text}") from exc

    @staticmethod
    def _to_grant(
        payload: Dict[str, Any], *, failure: str, default_expiry: int = 0
    ) -> TokenGrant:
        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise TokenExchangeError(f"{failure}: response did not include an access token.")

        expires_in = payload.get("expires_in") or default_expiry
        return TokenGrant(
            access_token=access_token,
            expires_in=int(expires_in),
            token_type=payload.get("token_type", "bearer"),
        )


__all__ = [
    "LONG_LIVED_TOKEN_SECONDS",
    "MetaOAuthClient",
    "TokenExchangeError",
    "TokenGrant",
]
