"""
Named, schema-validated tool calls backed by the Meta API client.

``ToolDispatcher.call`` validates arguments before resolving a credential, so
malformed calls never reach the token store or the network.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Type

from meta_ads_mcp.core.config import MetaSettings
from meta_ads_mcp.schemas import tools as schemas
from meta_ads_mcp.services.assistants import (
    PLACEHOLDER_NOTICE,
    AdCopyGenerator,
    CampaignPlanner,
    PerformanceAnalyst,
    PlaceholderAdCopyGenerator,
    PlaceholderCampaignPlanner,
    PlaceholderPerformanceAnalyst,
)
from meta_ads_mcp.services.credentials import CredentialService, is_token_expired

logger = logging.getLogger(__name__)

SERVER_NAME = "Meta Ads Platform MCP"
SERVER_VERSION = "2.0.0"

NEXT_STEPS = [
    "Review the campaign details",
    "Adjust budget or targeting if needed",
    "Use 'create_campaign' tool to create it",
    "Use 'create_adset' to add ad sets",
    "Use 'create_ad' to launch ads",
]


class UnknownToolError(Exception):
    """Raised when a call names a tool that is not registered."""


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    params_model: Type[schemas.ToolParams]
    handler: Callable[[Any], Awaitable[Any]]


class ToolDispatcher:
    """Registry of every Meta Ads tool and the single entry point to run them."""

    def __init__(
        self,
        credentials: CredentialService,
        meta_settings: MetaSettings,
        *,
        planner: Optional[CampaignPlanner] = None,
        copywriter: Optional[AdCopyGenerator] = None,
        analyst: Optional[PerformanceAnalyst] = None,
    ) -> None:
        self._credentials = credentials
        self._meta = meta_settings
        self._planner = planner or PlaceholderCampaignPlanner()
        self._copywriter = copywriter or PlaceholderAdCopyGenerator()
        self._analyst = analyst or PlaceholderPerformanceAnalyst()
        self._tools: Dict[str, ToolDefinition] = {
            definition.name: definition for definition in self._build_definitions()
        }

    @property
    def definitions(self) -> List[ToolDefinition]:
        return list(self._tools.values())

    def get_definition(self, name: str) -> ToolDefinition:
        try:
            return self._tools[name]
        except KeyError as exc:
            raise UnknownToolError(f"Unknown tool: {name}") from exc

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> str:
        """Validate ``arguments`` for tool ``name``, run it and return JSON text."""
        definition = self.get_definition(name)
        params = definition.params_model.model_validate(dict(arguments or {}))
        logger.info("Running tool %s for user %s", name, params.user_id)
        result = await definition.handler(params)
        return json.dumps(result, indent=2, default=str)

    def _build_definitions(self) -> List[ToolDefinition]:
        return [
            ToolDefinition(
                "test_connection",
                "Test if the MCP server is working and check authentication status",
                schemas.ConnectionCheckParams,
                self._test_connection,
            ),
            ToolDefinition(
                "check_auth_status",
                "Check if user has connected their Meta Ads account",
                schemas.CheckAuthStatusParams,
                self._check_auth_status,
            ),
            ToolDefinition(
                "get_ad_accounts",
                "Get all Meta ad accounts accessible by the user",
                schemas.GetAdAccountsParams,
                self._get_ad_accounts,
            ),
            ToolDefinition(
                "get_campaigns",
                "Get campaigns for an ad account",
                schemas.GetCampaignsParams,
                self._get_campaigns,
            ),
            ToolDefinition(
                "create_campaign",
                "Create a new Meta Ads campaign",
                schemas.CreateCampaignParams,
                self._create_campaign,
            ),
            ToolDefinition(
                "update_campaign",
                "Update an existing campaign",
                schemas.UpdateCampaignParams,
                self._update_campaign,
            ),
            ToolDefinition(
                "get_campaign_insights",
                "Get performance insights for a campaign",
                schemas.GetCampaignInsightsParams,
                self._get_campaign_insights,
            ),
            ToolDefinition(
                "create_adset",
                "Create a new ad set in a campaign",
                schemas.CreateAdSetParams,
                self._create_adset,
            ),
            ToolDefinition(
                "create_ad_creative",
                "Create a new ad creative",
                schemas.CreateAdCreativeParams,
                self._create_ad_creative,
            ),
            ToolDefinition(
                "create_ad",
                "Create a new ad in an ad set",
                schemas.CreateAdParams,
                self._create_ad,
            ),
            ToolDefinition(
                "search_interests",
                "Search for targeting interests",
                schemas.SearchInterestsParams,
                self._search_interests,
            ),
            ToolDefinition(
                "upload_ad_image",
                "Upload an image for use in ads",
                schemas.UploadAdImageParams,
                self._upload_ad_image,
            ),
            ToolDefinition(
                "get_custom_audiences",
                "Get custom audiences for an ad account",
                schemas.GetCustomAudiencesParams,
                self._get_custom_audiences,
            ),
            ToolDefinition(
                "create_custom_audience",
                "Create a custom audience in an ad account",
                schemas.CreateCustomAudienceParams,
                self._create_custom_audience,
            ),
            ToolDefinition(
                "create_lookalike_audience",
                "Create a lookalike audience seeded from an existing custom audience",
                schemas.CreateLookalikeAudienceParams,
                self._create_lookalike_audience,
            ),
            ToolDefinition(
                "get_ad_creatives",
                "Get ad creatives for an account",
                schemas.GetAdCreativesParams,
                self._get_ad_creatives,
            ),
            ToolDefinition(
                "create_campaign_from_prompt",
                "Draft a complete campaign from a natural language description",
                schemas.CreateCampaignFromPromptParams,
                self._create_campaign_from_prompt,
            ),
            ToolDefinition(
                "analyze_campaign_performance",
                "Get an analysis of campaign performance with recommendations",
                schemas.AnalyzeCampaignPerformanceParams,
                self._analyze_campaign_performance,
            ),
        ]

    def _backend_notice(self, *helpers: Any) -> Dict[str, Any]:
        functional = all(getattr(helper, "functional", False) for helper in helpers)
        notice: Dict[str, Any] = {"functional": functional}
        if not functional:
            notice["notice"] = PLACEHOLDER_NOTICE
        return notice

    async def _test_connection(self, params: schemas.ConnectionCheckParams) -> Dict[str, Any]:
        credential = self._credentials.stored_credential(params.user_id)
        return {
            "status": "connected",
            "server_version": SERVER_VERSION,
            "server_type": "self-hosted",
            "has_meta_app_id": bool(self._meta.app_id),
            "has_meta_app_secret": bool(self._meta.app_secret),
            "ai_backend_configured": self._backend_notice(
                self._planner, self._copywriter, self._analyst
            )["functional"],
            "user_authenticated": credential is not None,
            "token_expired": is_token_expired(credential.expires_at) if credential else None,
            "ad_accounts_count": len(credential.linked_resources) if credential else 0,
        }

    async def _check_auth_status(self, params: schemas.CheckAuthStatusParams) -> Dict[str, Any]:
        return await self._credentials.auth_status(params.user_id)

    async def _get_ad_accounts(self, params: schemas.GetAdAccountsParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.get_ad_accounts("me", params.limit)

    async def _get_campaigns(self, params: schemas.GetCampaignsParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.get_campaigns(
            params.account_id, limit=params.limit, status_filter=params.status_filter
        )

    async def _create_campaign(self, params: schemas.CreateCampaignParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.create_campaign(
            params.account_id,
            name=params.name,
            objective=params.objective,
            status=params.status,
            daily_budget=params.daily_budget,
            lifetime_budget=params.lifetime_budget,
            special_ad_categories=params.special_ad_categories,
            bid_strategy=params.bid_strategy,
        )

    async def _update_campaign(self, params: schemas.UpdateCampaignParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        changes = params.model_dump(exclude={"user_id", "campaign_id"}, exclude_none=True)
        return await client.update_campaign(params.campaign_id, **changes)

    async def _get_campaign_insights(self, params: schemas.GetCampaignInsightsParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.get_insights(
            params.campaign_id,
            time_range=params.time_range,
            date_preset=params.date_preset,
            breakdown=params.breakdown,
            level="campaign",
        )

    async def _create_adset(self, params: schemas.CreateAdSetParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.create_ad_set(
            params.account_id,
            campaign_id=params.campaign_id,
            name=params.name,
            targeting=params.targeting,
            status=params.status,
            billing_event=params.billing_event,
            optimization_goal=params.optimization_goal,
            daily_budget=params.daily_budget,
            lifetime_budget=params.lifetime_budget,
            start_time=params.start_time,
            end_time=params.end_time,
        )

    async def _create_ad_creative(self, params: schemas.CreateAdCreativeParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.create_ad_creative(
            params.account_id,
            name=params.name,
            object_story_spec=params.object_story_spec,
            degrees_of_freedom_spec=params.degrees_of_freedom_spec,
        )

    async def _create_ad(self, params: schemas.CreateAdParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.create_ad(
            params.account_id,
            name=params.name,
            adset_id=params.adset_id,
            creative_id=params.creative_id,
            status=params.status,
        )

    async def _search_interests(self, params: schemas.SearchInterestsParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.search_interests(params.query, params.limit)

    async def _upload_ad_image(self, params: schemas.UploadAdImageParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.upload_image(params.account_id, params.image_url, params.name)

    async def _get_custom_audiences(self, params: schemas.GetCustomAudiencesParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.get_custom_audiences(params.account_id, params.limit)

    async def _create_custom_audience(self, params: schemas.CreateCustomAudienceParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.create_custom_audience(
            params.account_id,
            name=params.name,
            subtype=params.subtype,
            description=params.description,
            customer_file_source=params.customer_file_source,
        )

    async def _create_lookalike_audience(
        self, params: schemas.CreateLookalikeAudienceParams
    ) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.create_lookalike_audience(
            params.account_id,
            name=params.name,
            origin_audience_id=params.origin_audience_id,
            lookalike_spec=params.lookalike_spec,
        )

    async def _get_ad_creatives(self, params: schemas.GetAdCreativesParams) -> Any:
        client = await self._credentials.get_client(params.user_id)
        return await client.get_ad_creatives(params.account_id, params.limit)

    async def _create_campaign_from_prompt(
        self, params: schemas.CreateCampaignFromPromptParams
    ) -> Dict[str, Any]:
        client = await self._credentials.get_client(params.user_id)
        plan = await self._planner.plan(params.prompt, params.budget)
        accounts = await client.get_ad_accounts("me", 10)
        variations = await self._copywriter.generate(params.prompt, "en", 5)
        return {
            "campaign_plan": plan.model_dump(),
            "target_account_id": params.account_id,
            "available_accounts": accounts.get("data") or [],
            "ad_variations": [variation.model_dump() for variation in variations],
            "ai_backend": self._backend_notice(self._planner, self._copywriter),
            "next_steps": NEXT_STEPS,
        }

    async def _analyze_campaign_performance(
        self, params: schemas.AnalyzeCampaignPerformanceParams
    ) -> Dict[str, Any]:
        client = await self._credentials.get_client(params.user_id)
        insights = await client.get_insights(
            params.campaign_id, time_range=params.time_range, level="campaign"
        )
        analysis = await self._analyst.analyze(insights)
        return {
            "raw_insights": insights,
            "ai_analysis": analysis.model_dump(),
            "ai_backend": self._backend_notice(self._analyst),
        }


__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "ToolDefinition",
    "ToolDispatcher",
    "UnknownToolError",
]
