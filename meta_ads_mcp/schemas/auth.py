"""Schemas related to OAuth flows."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DisconnectRequest(BaseModel):
    """Body of ``POST /auth/disconnect``."""

    user_id: str = Field(..., min_length=1, description="User whose credential should be removed.")


class DisconnectResponse(BaseModel):
    success: bool
    message: str


class OAuthErrorResponse(BaseModel):
    """JSON body returned when the OAuth callback fails."""

    error: str = Field(..., description="Machine-readable reason code.")
    message: str


__all__ = ["DisconnectRequest", "DisconnectResponse", "OAuthErrorResponse"]
