"""Service layer exports."""

from .assistants import (
    PlaceholderAdCopyGenerator,
    PlaceholderCampaignPlanner,
    PlaceholderPerformanceAnalyst,
)
from .credentials import AuthorizationError, CredentialService, is_token_expired
from .oauth_flow import ConnectionSummary, OAuthFlowController, OAuthProtocolError
from .token_cipher import TokenCipherService
from .token_store import TokenStore

__all__ = [
    "AuthorizationError",
    "ConnectionSummary",
    "CredentialService",
    "OAuthFlowController",
    "OAuthProtocolError",
    "PlaceholderAdCopyGenerator",
    "PlaceholderCampaignPlanner",
    "PlaceholderPerformanceAnalyst",
    "TokenCipherService",
    "TokenStore",
    "is_token_expired",
]
