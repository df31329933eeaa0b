"""Public schema exports."""

from .auth import DisconnectRequest, DisconnectResponse, OAuthErrorResponse
from .tools import CampaignObjective, CampaignStatus, ToolParams

__all__ = [
    "CampaignObjective",
    "CampaignStatus",
    "DisconnectRequest",
    "DisconnectResponse",
    "OAuthErrorResponse",
    "ToolParams",
]
