"""
FastMCP registration for the Meta Ads tools.

Each registered function only gathers its arguments and hands them to the
``ToolDispatcher``, which owns validation and execution.
"""

from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from meta_ads_mcp.schemas.tools import CampaignObjective, CampaignStatus
from meta_ads_mcp.tools.dispatcher import SERVER_NAME, ToolDispatcher


def _drop_unset(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in arguments.items() if value is not None}


def create_mcp_server(dispatcher: ToolDispatcher, host: str = "127.0.0.1") -> FastMCP:
    """Build a FastMCP server exposing every dispatcher tool.

    ``host`` is the bind address; the SDK only enforces localhost Host headers
    when it is a loopback address.
    """
    server = FastMCP(SERVER_NAME, host=host)

    def register(name: str):
        return server.tool(name=name, description=dispatcher.get_definition(name).description)

    async def forward(name: str, **arguments: Any) -> str:
        return await dispatcher.call(name, _drop_unset(arguments))

    @register("test_connection")
    async def test_connection(user_id: str = "test-user") -> str:
        return await forward("test_connection", user_id=user_id)

    @register("check_auth_status")
    async def check_auth_status(user_id: str) -> str:
        return await forward("check_auth_status", user_id=user_id)

    @register("get_ad_accounts")
    async def get_ad_accounts(user_id: str, limit: int = 200) -> str:
        return await forward("get_ad_accounts", user_id=user_id, limit=limit)

    @register("get_campaigns")
    async def get_campaigns(
        user_id: str,
        account_id: str,
        limit: int = 10,
        status_filter: Optional[str] = None,
    ) -> str:
        return await forward(
            "get_campaigns",
            user_id=user_id,
            account_id=account_id,
            limit=limit,
            status_filter=status_filter,
        )

    @register("create_campaign")
    async def create_campaign(
        user_id: str,
        account_id: str,
        name: str,
        objective: CampaignObjective,
        status: CampaignStatus = "PAUSED",
        daily_budget: Optional[float] = None,
        lifetime_budget: Optional[float] = None,
        special_ad_categories: Optional[List[str]] = None,
        bid_strategy: Optional[str] = None,
    ) -> str:
        return await forward(
            "create_campaign",
            user_id=user_id,
            account_id=account_id,
            name=name,
            objective=objective,
            status=status,
            daily_budget=daily_budget,
            lifetime_budget=lifetime_budget,
            special_ad_categories=special_ad_categories,
            bid_strategy=bid_strategy,
        )

    @register("update_campaign")
    async def update_campaign(
        user_id: str,
        campaign_id: str,
        status: Optional[CampaignStatus] = None,
        name: Optional[str] = None,
        daily_budget: Optional[float] = None,
    ) -> str:
        return await forward(
            "update_campaign",
            user_id=user_id,
            campaign_id=campaign_id,
            status=status,
            name=name,
            daily_budget=daily_budget,
        )

    @register("get_campaign_insights")
    async def get_campaign_insights(
        user_id: str,
        campaign_id: str,
        time_range: str = "last_7d",
        date_preset: Optional[str] = None,
        breakdown: Optional[str] = None,
    ) -> str:
        return await forward(
            "get_campaign_insights",
            user_id=user_id,
            campaign_id=campaign_id,
            time_range=time_range,
            date_preset=date_preset,
            breakdown=breakdown,
        )

    @register("create_adset")
    async def create_adset(
        user_id: str,
        account_id: str,
        campaign_id: str,
        name: str,
        targeting: Dict[str, Any],
        status: CampaignStatus = "PAUSED",
        daily_budget: Optional[str] = None,
        lifetime_budget: Optional[str] = None,
        optimization_goal: str = "LINK_CLICKS",
        billing_event: str = "IMPRESSIONS",
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> str:
        return await forward(
            "create_adset",
            user_id=user_id,
            account_id=account_id,
            campaign_id=campaign_id,
            name=name,
            targeting=targeting,
            status=status,
            daily_budget=daily_budget,
            lifetime_budget=lifetime_budget,
            optimization_goal=optimization_goal,
            billing_event=billing_event,
            start_time=start_time,
            end_time=end_time,
        )

    @register("create_ad_creative")
    async def create_ad_creative(
        user_id: str,
        account_id: str,
        name: str,
        object_story_spec: Dict[str, Any],
        degrees_of_freedom_spec: Optional[Dict[str, Any]] = None,
    ) -> str:
        return await forward(
            "create_ad_creative",
            user_id=user_id,
            account_id=account_id,
            name=name,
            object_story_spec=object_story_spec,
            degrees_of_freedom_spec=degrees_of_freedom_spec,
        )

    @register("create_ad")
    async def create_ad(
        user_id: str,
        account_id: str,
        name: str,
        adset_id: str,
        creative_id: str,
        status: CampaignStatus = "PAUSED",
    ) -> str:
        return await forward(
            "create_ad",
            user_id=user_id,
            account_id=account_id,
            name=name,
            adset_id=adset_id,
            creative_id=creative_id,
            status=status,
        )

    @register("search_interests")
    async def search_interests(user_id: str, query: str, limit: int = 25) -> str:
        return await forward("search_interests", user_id=user_id, query=query, limit=limit)

    @register("upload_ad_image")
    async def upload_ad_image(
        user_id: str, account_id: str, image_url: str, name: Optional[str] = None
    ) -> str:
        return await forward(
            "upload_ad_image",
            user_id=user_id,
            account_id=account_id,
            image_url=image_url,
            name=name,
        )

    @register("get_custom_audiences")
    async def get_custom_audiences(user_id: str, account_id: str, limit: int = 100) -> str:
        return await forward(
            "get_custom_audiences", user_id=user_id, account_id=account_id, limit=limit
        )

    @register("create_custom_audience")
    async def create_custom_audience(
        user_id: str,
        account_id: str,
        name: str,
        subtype: str = "CUSTOM",
        description: Optional[str] = None,
        customer_file_source: Optional[str] = None,
    ) -> str:
        return await forward(
            "create_custom_audience",
            user_id=user_id,
            account_id=account_id,
            name=name,
            subtype=subtype,
            description=description,
            customer_file_source=customer_file_source,
        )

    @register("create_lookalike_audience")
    async def create_lookalike_audience(
        user_id: str,
        account_id: str,
        name: str,
        origin_audience_id: str,
        lookalike_spec: Dict[str, Any],
    ) -> str:
        return await forward(
            "create_lookalike_audience",
            user_id=user_id,
            account_id=account_id,
            name=name,
            origin_audience_id=origin_audience_id,
            lookalike_spec=lookalike_spec,
        )

    @register("get_ad_creatives")
    async def get_ad_creatives(user_id: str, account_id: str, limit: int = 50) -> str:
        return await forward(
            "get_ad_creatives", user_id=user_id, account_id=account_id, limit=limit
        )

    @register("create_campaign_from_prompt")
    async def create_campaign_from_prompt(
        user_id: str,
        prompt: str,
        account_id: str,
        budget: Optional[float] = None,
    ) -> str:
        return await forward(
            "create_campaign_from_prompt",
            user_id=user_id,
            prompt=prompt,
            account_id=account_id,
            budget=budget,
        )

    @register("analyze_campaign_performance")
    async def analyze_campaign_performance(
        user_id: str, campaign_id: str, time_range: str = "last_7d"
    ) -> str:
        return await forward(
            "analyze_campaign_performance",
            user_id=user_id,
            campaign_id=campaign_id,
            time_range=time_range,
        )

    return server


__all__ = ["create_mcp_server"]
