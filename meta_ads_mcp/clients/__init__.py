"""Expose constructed client wrappers."""

from .meta_api import MetaAPIClient, RemoteAPIError, resolve_time_range
from .meta_auth import MetaOAuthClient, TokenExchangeError, TokenGrant
from .sqlite_store import SQLiteCredentialStore
from .state_store import SQLiteStateStore

__all__ = [
    "MetaAPIClient",
    "MetaOAuthClient",
    "RemoteAPIError",
    "SQLiteCredentialStore",
    "SQLiteStateStore",
    "TokenExchangeError",
    "TokenGrant",
    "resolve_time_range",
]
