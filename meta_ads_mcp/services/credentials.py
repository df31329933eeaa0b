"""
Resolve which Meta access token a tool call should run with.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from meta_ads_mcp.clients.meta_api import MetaAPIClient, RemoteAPIError
from meta_ads_mcp.models.credential import Credential
from meta_ads_mcp.services.token_store import TokenStore

logger = logging.getLogger(__name__)

# Tokens this close to expiry are rejected outright.
EXPIRY_BUFFER_SECONDS = 86400

UNREADABLE_TOKEN_MESSAGE = (
    "Stored access token is unreadable. Please reconnect your Meta Ads account."
)


class AuthorizationError(Exception):
    """Raised when a user has no usable Meta credential."""


def is_token_expired(expires_at: int, now: Optional[float] = None) -> bool:
    """Return True when fewer than 24 hours remain before ``expires_at``."""
    current = time.time() if now is None else now
    return expires_at - current < EXPIRY_BUFFER_SECONDS


def _account_summary(account: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": account.get("id"),
        "name": account.get("name"),
        "account_id": account.get("account_id"),
        "currency": account.get("currency"),
    }


class CredentialService:
    """Builds ``MetaAPIClient`` instances for users, or for the override token."""

    def __init__(
        self,
        token_store: TokenStore,
        *,
        api_version: str,
        override_token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._tokens = token_store
        self._api_version = api_version
        self._override_token = override_token
        self._timeout = timeout
        self._transport = transport

    @property
    def uses_override_token(self) -> bool:
        return bool(self._override_token)

    def build_client(self, access_token: str) -> MetaAPIClient:
        return MetaAPIClient(
            access_token,
            self._api_version,
            timeout=self._timeout,
            transport=self._transport,
        )

    def _load_credential(self, user_id: str) -> Optional[Credential]:
        """Read the stored credential; an undecryptable row raises ``AuthorizationError``."""
        try:
            return self._tokens.get_credential(user_id)
        except ValueError as exc:
            logger.warning("Stored Meta credential for user %s is unreadable: %s", user_id, exc)
            raise AuthorizationError(UNREADABLE_TOKEN_MESSAGE) from exc

    def stored_credential(self, user_id: str) -> Optional[Credential]:
        """Like ``_load_credential`` but an unreadable row counts as not connected."""
        try:
            return self._load_credential(user_id)
        except AuthorizationError:
            return None

    async def get_client(self, user_id: str) -> MetaAPIClient:
        """Return an API client for ``user_id`` or raise ``AuthorizationError``."""
        if self._override_token:
            return self.build_client(self._override_token)

        credential = self._load_credential(user_id)
        if credential is None:
            raise AuthorizationError(
                "User not authenticated. Please connect your Meta Ads account first."
            )
        if is_token_expired(credential.expires_at):
            raise AuthorizationError(
                "Access token expired. Please reconnect your Meta Ads account."
            )
        return self.build_client(credential.access_token)

    async def auth_status(self, user_id: str) -> Dict[str, Any]:
        """Describe whether ``user_id`` can currently call the Graph API."""
        if self._override_token:
            client = self.build_client(self._override_token)
            try:
                accounts = await client.get_ad_accounts("me", 10)
            except (RemoteAPIError, httpx.HTTPError) as exc:
                logger.warning("Override token check failed: %s", exc)
                return {
                    "authenticated": False,
                    "mode": "development",
                    "using_direct_token": True,
                    "error": str(exc),
                    "message": "META_ACCESS_TOKEN is set but invalid or expired",
                }
            data = accounts.get("data") or []
            return {
                "authenticated": True,
                "mode": "development",
                "using_direct_token": True,
                "ad_accounts_count": len(data),
                "ad_accounts": [_account_summary(account) for account in data],
                "message": "Using META_ACCESS_TOKEN (development mode)",
            }

        try:
            credential = self._load_credential(user_id)
        except AuthorizationError as exc:
            return {
                "authenticated": False,
                "mode": "production",
                "message": str(exc),
                "oauth_url": "/auth/meta",
            }
        if credential is None:
            return {
                "authenticated": False,
                "mode": "production",
                "message": "User needs to connect Meta Ads account",
                "oauth_url": "/auth/meta",
            }

        return {
            "authenticated": True,
            "mode": "production",
            "token_expired": is_token_expired(credential.expires_at),
            "expires_at": datetime.fromtimestamp(credential.expires_at, tz=timezone.utc).isoformat(),
            "ad_accounts_count": len(credential.linked_resources),
            "ad_accounts": [
                _account_summary(resource.model_dump()) for resource in credential.linked_resources
            ],
        }


__all__ = [
    "AuthorizationError",
    "CredentialService",
    "EXPIRY_BUFFER_SECONDS",
    "UNREADABLE_TOKEN_MESSAGE",
    "is_token_expired",
]
