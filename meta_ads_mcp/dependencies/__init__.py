"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_credential_service,
    get_credential_store,
    get_meta_oauth_client,
    get_oauth_flow,
    get_state_store,
    get_token_cipher_service,
    get_token_store,
    get_tool_dispatcher,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_credential_service",
    "get_credential_store",
    "get_meta_oauth_client",
    "get_oauth_flow",
    "get_state_store",
    "get_token_cipher_service",
    "get_token_store",
    "get_tool_dispatcher",
]
