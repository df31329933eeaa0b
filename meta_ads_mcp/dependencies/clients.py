"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from meta_ads_mcp.clients import (
    MetaOAuthClient,
    SQLiteCredentialStore,
    SQLiteStateStore,
)
from meta_ads_mcp.core.config import get_settings
from meta_ads_mcp.services import (
    CredentialService,
    OAuthFlowController,
    TokenCipherService,
    TokenStore,
)
from meta_ads_mcp.tools import ToolDispatcher


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_meta_oauth_client() -> MetaOAuthClient:
    """Create a singleton Meta OAuth client."""
    return MetaOAuthClient(_settings().meta)


@lru_cache()
def get_state_store() -> SQLiteStateStore:
    """Provide the store holding pending OAuth states."""
    return SQLiteStateStore(_settings().database_path)


@lru_cache()
def get_credential_store() -> SQLiteCredentialStore:
    """Provide the SQLite credential table."""
    return SQLiteCredentialStore(_settings().database_path)


@lru_cache()
def get_token_cipher_service() -> TokenCipherService:
    """Provide symmetric encryption helper for token storage."""
    settings = _settings()
    secret = settings.security.token_encryption_secret or settings.meta.app_secret
    return TokenCipherService(secret=secret)


@lru_cache()
def get_token_store() -> TokenStore:
    return TokenStore(get_credential_store(), get_token_cipher_service())


@lru_cache()
def get_credential_service() -> CredentialService:
    """Resolve per-user API clients, honouring the override token when set."""
    meta = _settings().meta
    return CredentialService(
        get_token_store(),
        api_version=meta.api_version,
        override_token=meta.access_token,
        timeout=meta.http_timeout,
    )


def get_oauth_flow() -> OAuthFlowController:
    """Build the OAuth flow controller from shared collaborators."""
    return OAuthFlowController(
        oauth_client=get_meta_oauth_client(),
        state_store=get_state_store(),
        token_store=get_token_store(),
        credentials=get_credential_service(),
        state_ttl_seconds=_settings().oauth.state_ttl_seconds,
    )


@lru_cache()
def get_tool_dispatcher() -> ToolDispatcher:
    return ToolDispatcher(get_credential_service(), _settings().meta)


__all__ = [
    "get_credential_service",
    "get_credential_store",
    "get_meta_oauth_client",
    "get_oauth_flow",
    "get_state_store",
    "get_token_cipher_service",
    "get_token_store",
    "get_tool_dispatcher",
]
