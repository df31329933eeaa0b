"""
Domain models for stored Meta credentials.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LinkedResource(BaseModel):
    """Ad account snapshot captured when the token was last refreshed."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: Optional[str] = None
    account_id: Optional[str] = None
    currency: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.account_id or self.id


class Credential(BaseModel):
    """Represents the single token record stored for a user."""

    user_id: str = Field(..., description="Identity that completed the OAuth flow.")
    access_token: str
    expires_at: int = Field(..., description="Unix timestamp after which the token is unusable.")
    linked_resources: List[LinkedResource] = Field(default_factory=list)
    created_at: int
    updated_at: int


__all__ = ["Credential", "LinkedResource"]
