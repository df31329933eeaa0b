"""
Three-legged Meta OAuth flow: start, callback and disconnect.

The controller keeps no state between requests. Pending states live in the
state store and finished credentials in the token store.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import httpx
from pydantic import ValidationError

from meta_ads_mcp.clients.meta_api import RemoteAPIError
from meta_ads_mcp.clients.meta_auth import MetaOAuthClient, TokenExchangeError
from meta_ads_mcp.clients.state_store import SQLiteStateStore
from meta_ads_mcp.models.credential import LinkedResource
from meta_ads_mcp.services.credentials import CredentialService
from meta_ads_mcp.services.token_store import TokenStore

logger = logging.getLogger(__name__)


class OAuthProtocolError(Exception):
    """Raised when the callback cannot be accepted (client-side problem)."""

    def __init__(self, reason: str, message: str) -> None:
        self.reason = reason
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class ConnectionSummary:
    """Outcome of a completed OAuth callback."""

    user_id: str
    expires_in: int
    expires_at: int
    linked_resources: List[LinkedResource] = field(default_factory=list)

    @property
    def expires_in_days(self) -> int:
        return self.expires_in // 86400


class OAuthFlowController:
    """Coordinates the state store, the token endpoint and the token store."""

    def __init__(
        self,
        *,
        oauth_client: MetaOAuthClient,
        state_store: SQLiteStateStore,
        token_store: TokenStore,
        credentials: CredentialService,
        state_ttl_seconds: int = 600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._oauth = oauth_client
        self._states = state_store
        self._tokens = token_store
        self._credentials = credentials
        self._state_ttl = state_ttl_seconds
        self._clock = clock

    async def start(self, user_id: str) -> str:
        """Issue a state bound to ``user_id`` and return the consent dialog URL."""
        state = secrets.token_urlsafe(32)
        self._states.put(state, user_id, self._state_ttl)
        logger.info("Started Meta OAuth flow for user %s", user_id)
        return self._oauth.build_authorization_url(state)

    async def complete(
        self,
        *,
        code: Optional[str],
        state: Optional[str],
        error: Optional[str] = None,
        error_description: Optional[str] = None,
    ) -> ConnectionSummary:
        """Validate the callback, exchange the code and store the credential."""
        if error:
            logger.warning("Meta OAuth returned error %s: %s", error, error_description)
            raise OAuthProtocolError("oauth_error", error_description or error)

        if not code or not state:
            raise OAuthProtocolError("missing_parameters", "Missing code or state parameter")

        # Never issued, expired and already consumed all look the same here.
        user_id = self._states.pop(state)
        if not user_id:
            raise OAuthProtocolError("invalid_state", "Invalid or expired state parameter")

        try:
            short_lived = await self._oauth.exchange_authorization_code(code)
            long_lived = await self._oauth.exchange_long_lived_token(short_lived.access_token)
            client = self._credentials.build_client(long_lived.access_token)
            accounts = await client.get_ad_accounts("me", 200)
        except TokenExchangeError:
            logger.exception("Meta token exchange failed for user %s", user_id)
            raise
        except (RemoteAPIError, httpx.HTTPError) as exc:
            logger.exception("Meta OAuth callback failed for user %s", user_id)
            raise TokenExchangeError(str(exc)) from exc

        now = int(self._clock())
        expires_at = now + long_lived.expires_in
        try:
            credential = self._tokens.upsert_credential(
                user_id=user_id,
                access_token=long_lived.access_token,
                expires_at=expires_at,
                linked_resources=accounts.get("data") or [],
                now=now,
            )
        except ValidationError as exc:
            logger.exception("Meta returned malformed ad accounts for user %s", user_id)
            raise TokenExchangeError(f"Unexpected ad account data: {exc}") from exc
        logger.info(
            "Stored Meta credential for user %s with %d ad account(s)",
            user_id,
            len(credential.linked_resources),
        )

        return ConnectionSummary(
            user_id=user_id,
            expires_in=long_lived.expires_in,
            expires_at=expires_at,
            linked_resources=credential.linked_resources,
        )

    async def disconnect(self, user_id: str) -> bool:
        """Forget the credential for ``user_id``; returns whether one existed."""
        existed = self._tokens.delete_credential(user_id)
        logger.info("Disconnect for user %s (existed=%s)", user_id, existed)
        return existed


__all__ = ["ConnectionSummary", "OAuthFlowController", "OAuthProtocolError"]
