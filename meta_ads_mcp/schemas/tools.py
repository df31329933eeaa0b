"""
Pydantic parameter models for the MCP tools.

Open-ended payloads whose shape belongs to the Graph API (targeting specs,
object story specs, lookalike specs) are plain dictionaries and are only
validated by Meta.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

CampaignObjective = Literal[
    "OUTCOME_AWARENESS",
    "OUTCOME_ENGAGEMENT",
    "OUTCOME_LEADS",
    "OUTCOME_SALES",
    "OUTCOME_TRAFFIC",
    "OUTCOME_APP_PROMOTION",
]
CampaignStatus = Literal["ACTIVE", "PAUSED"]


class ToolParams(BaseModel):
    """Base class for tool arguments: strict types, no unknown keys."""

    model_config = ConfigDict(strict=True, extra="forbid")

    user_id: str = Field(..., min_length=1, description="User ID")


class ConnectionCheckParams(ToolParams):
    user_id: str = Field("test-user", min_length=1)


class CheckAuthStatusParams(ToolParams):
    pass


class GetAdAccountsParams(ToolParams):
    limit: int = Field(200, ge=1)


class GetCampaignsParams(ToolParams):
    account_id: str = Field(..., description="Format: act_XXXXXXXXX")
    limit: int = Field(10, ge=1)
    status_filter: Optional[str] = None


class CreateCampaignParams(ToolParams):
    account_id: str = Field(..., description="Ad account ID (act_XXXXXXXXX)")
    name: str = Field(..., min_length=1, description="Campaign name")
    objective: CampaignObjective
    status: CampaignStatus = "PAUSED"
    daily_budget: Optional[float] = Field(None, gt=0)
    lifetime_budget: Optional[float] = Field(None, gt=0)
    special_ad_categories: Optional[List[str]] = None
    bid_strategy: Optional[str] = None


class UpdateCampaignParams(ToolParams):
    campaign_id: str = Field(..., description="Campaign ID")
    status: Optional[CampaignStatus] = None
    name: Optional[str] = None
    daily_budget: Optional[float] = Field(None, gt=0)


class GetCampaignInsightsParams(ToolParams):
    campaign_id: str = Field(..., description="Campaign ID")
    time_range: str = Field(
        "last_7d",
        description=(
            "today, yesterday, last_7d, last_14d, last_30d, this_month, "
            "last_month or maximum"
        ),
    )
    date_preset: Optional[str] = Field(
        None, description="Graph API date_preset; takes precedence over time_range."
    )
    breakdown: Optional[str] = None


class CreateAdSetParams(ToolParams):
    account_id: str = Field(..., description="Ad account ID")
    campaign_id: str = Field(..., description="Campaign ID")
    name: str = Field(..., min_length=1, description="Ad set name")
    status: CampaignStatus = "PAUSED"
    daily_budget: Optional[str] = None
    lifetime_budget: Optional[str] = None
    targeting: Dict[str, Any] = Field(..., description="Targeting spec")
    optimization_goal: str = "LINK_CLICKS"
    billing_event: str = "IMPRESSIONS"
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class CreateAdCreativeParams(ToolParams):
    account_id: str = Field(..., description="Ad account ID")
    name: str = Field(..., min_length=1, description="Creative name")
    object_story_spec: Dict[str, Any] = Field(..., description="Creative spec")
    degrees_of_freedom_spec: Optional[Dict[str, Any]] = None


class CreateAdParams(ToolParams):
    account_id: str = Field(..., description="Ad account ID")
    name: str = Field(..., min_length=1, description="Ad name")
    adset_id: str = Field(..., description="Ad set ID")
    creative_id: str = Field(..., description="Creative ID")
    status: CampaignStatus = "PAUSED"


class SearchInterestsParams(ToolParams):
    query: str = Field(..., min_length=1, description="Search query")
    limit: int = Field(25, ge=1)


class UploadAdImageParams(ToolParams):
    account_id: str = Field(..., description="Ad account ID")
    image_url: str = Field(..., description="URL of image to upload")
    name: Optional[str] = None


class GetCustomAudiencesParams(ToolParams):
    account_id: str = Field(..., description="Ad account ID")
    limit: int = Field(100, ge=1)


class CreateCustomAudienceParams(ToolParams):
    account_id: str = Field(..., description="Ad account ID")
    name: str = Field(..., min_length=1)
    subtype: str = Field("CUSTOM", description="Audience subtype, e.g. CUSTOM or WEBSITE")
    description: Optional[str] = None
    customer_file_source: Optional[str] = None


class CreateLookalikeAudienceParams(ToolParams):
    account_id: str = Field(..., description="Ad account ID")
    name: str = Field(..., min_length=1)
    origin_audience_id: str = Field(..., description="Seed custom audience ID")
    lookalike_spec: Dict[str, Any] = Field(
        ..., description='For example {"type": "similarity", "ratio": 0.01, "country": "US"}'
    )


class GetAdCreativesParams(ToolParams):
    account_id: str = Field(..., description="Ad account ID")
    limit: int = Field(50, ge=1)


class CreateCampaignFromPromptParams(ToolParams):
    prompt: str = Field(..., min_length=1, description="Natural language: what you want to achieve")
    account_id: str = Field(..., description="Ad account ID to create campaign in")
    budget: Optional[float] = Field(None, gt=0, description="Budget in account currency")


class AnalyzeCampaignPerformanceParams(ToolParams):
    campaign_id: str = Field(..., description="Campaign ID")
    time_range: str = "last_7d"


__all__ = [
    "AnalyzeCampaignPerformanceParams",
    "CampaignObjective",
    "CampaignStatus",
    "CheckAuthStatusParams",
    "ConnectionCheckParams",
    "CreateAdCreativeParams",
    "CreateAdParams",
    "CreateAdSetParams",
    "CreateCampaignFromPromptParams",
    "CreateCampaignParams",
    "CreateCustomAudienceParams",
    "CreateLookalikeAudienceParams",
    "GetAdAccountsParams",
    "GetAdCreativesParams",
    "GetCampaignInsightsParams",
    "GetCampaignsParams",
    "GetCustomAudiencesParams",
    "SearchInterestsParams",
    "ToolParams",
    "UpdateCampaignParams",
    "UploadAdImageParams",
]
