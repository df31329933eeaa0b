"""
Meta Marketing API client.

Maps the advertising operations exposed as tools onto Graph API endpoints.
Every call is a single attempt: a non-2xx response raises ``RemoteAPIError``.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx

from meta_ads_mcp.core.config import DEFAULT_API_VERSION

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"

AD_ACCOUNT_FIELDS = "id,name,account_id,currency,timezone_name,account_status,business"
CAMPAIGN_FIELDS = (
    "id,name,objective,status,daily_budget,lifetime_budget,budget_remaining,"
    "created_time,updated_time"
)
INSIGHT_FIELDS = (
    "impressions,clicks,spend,reach,frequency,ctr,cpc,cpm,actions,action_values,"
    "cost_per_action_type"
)
CUSTOM_AUDIENCE_FIELDS = (
    "id,name,description,approximate_count,delivery_status,operation_status,subtype"
)
AD_CREATIVE_FIELDS = "id,name,object_story_spec,thumbnail_url,effective_object_story_id"

TIME_RANGE_SHORTCUTS = (
    "today",
    "yesterday",
    "last_7d",
    "last_14d",
    "last_30d",
    "this_month",
    "last_month",
    "maximum",
)

_TRAILING_WINDOWS = {"last_7d": 7, "last_14d": 14, "last_30d": 30}


class RemoteAPIError(Exception):
    """Raised when the Graph API answers with a non-2xx status."""

    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"Meta API Error: {json.dumps(payload)}")


def resolve_time_range(
    range_name: str, today: Optional[date] = None
) -> Optional[Dict[str, str]]:
    """
    Turn a named shortcut into a concrete ``{"since", "until"}`` pair.

    ``maximum`` and unrecognized names both yield ``None`` so the Graph API
    applies its own default range.
    """
    current = today or datetime.now(timezone.utc).date()

    if range_name == "today":
        since, until = current, current
    elif range_name == "yesterday":
        since = until = current - timedelta(days=1)
    elif range_name in _TRAILING_WINDOWS:
        since, until = current - timedelta(days=_TRAILING_WINDOWS[range_name]), current
    elif range_name == "this_month":
        since, until = current.replace(day=1), current
    elif range_name == "last_month":
        until = current.replace(day=1) - timedelta(days=1)
        since = until.replace(day=1)
    else:
        return None

    return {"since": since.isoformat(), "until": until.isoformat()}


def _encode_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _encode_fields(values: Dict[str, Any]) -> Dict[str, str]:
    return {key: _encode_value(value) for key, value in values.items() if value is not None}


class MetaAPIClient:
    """Issue Graph API requests on behalf of a single access token."""

    def __init__(
        self,
        access_token: str,
        api_version: Optional[str] = None,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._access_token = access_token
        self.api_version = api_version or DEFAULT_API_VERSION
        self.base_url = f"{GRAPH_BASE_URL}/{self.api_version}"
        self._timeout = timeout
        self._transport = transport

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        query = _encode_fields(params or {})
        query["access_token"] = self._access_token
        form = _encode_fields(data) if data is not None else None

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.request(
                method, f"{self.base_url}{endpoint}", params=query, data=form
            )

        if not response.is_success:
            try:
                payload = response.json()
            except ValueError:
                payload = {"error": {"message": response.text}}
            logger.warning(
                "Graph API %s %s failed with status %s", method, endpoint, response.status_code
            )
            raise RemoteAPIError(response.status_code, payload)

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Graph API %s %s returned a non-JSON body", method, endpoint)
            raise RemoteAPIError(
                response.status_code, {"error": {"message": response.text}}
            ) from exc

    async def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", endpoint, params=params)

    async def _post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("POST", endpoint, data=data or {})

    async def get_ad_accounts(self, user: str = "me", limit: int = 200) -> Any:
        """List ad accounts accessible to the token owner."""
        return await self._get(f"/{user}/adaccounts", {"fields": AD_ACCOUNT_FIELDS, "limit": limit})

    async def get_campaigns(
        self,
        account_id: str,
        *,
        limit: int = 10,
        status_filter: Optional[str] = None,
        fields: Optional[str] = None,
    ) -> Any:
        params: Dict[str, Any] = {"fields": fields or CAMPAIGN_FIELDS, "limit": limit}
        if status_filter:
            params["status"] = status_filter
        return await self._get(f"/{account_id}/campaigns", params)

    async def create_campaign(
        self,
        account_id: str,
        *,
        name: str,
        objective: str,
        status: str = "PAUSED",
        daily_budget: Optional[float] = None,
        lifetime_budget: Optional[float] = None,
        special_ad_categories: Optional[List[str]] = None,
        bid_strategy: Optional[str] = None,
    ) -> Any:
        data: Dict[str, Any] = {
            "name": name,
            "objective": objective,
            "status": status,
            "special_ad_categories": special_ad_categories or [],
        }
        if daily_budget:
            data["daily_budget"] = daily_budget
        if lifetime_budget:
            data["lifetime_budget"] = lifetime_budget
        if bid_strategy:
            data["bid_strategy"] = bid_strategy
        return await self._post(f"/{account_id}/campaigns", data)

    async def update_campaign(self, campaign_id: str, **fields: Any) -> Any:
        return await self._post(f"/{campaign_id}", fields)

    async def get_insights(
        self,
        object_id: str,
        *,
        time_range: Optional[str] = None,
        date_preset: Optional[str] = None,
        level: str = "campaign",
        fields: Optional[str] = None,
        breakdown: Optional[str] = None,
    ) -> Any:
        """Fetch performance insights for a campaign, ad set or ad."""
        params: Dict[str, Any] = {"fields": fields or INSIGHT_FIELDS, "level": level}

        if date_preset:
            params["date_preset"] = date_preset
        elif time_range:
            resolved = resolve_time_range(time_range)
            if resolved:
                params["time_range"] = json.dumps(resolved)

        if breakdown:
            params["breakdowns"] = breakdown

        return await self._get(f"/{object_id}/insights", params)

    async def create_ad_set(
        self,
        account_id: str,
        *,
        campaign_id: str,
        name: str,
        targeting: Dict[str, Any],
        status: str = "PAUSED",
        billing_event: str = "IMPRESSIONS",
        optimization_goal: str = "LINK_CLICKS",
        daily_budget: Optional[str] = None,
        lifetime_budget: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> Any:
        data: Dict[str, Any] = {
            "campaign_id": campaign_id,
            "name": name,
            "status": status,
            "billing_event": billing_event,
            "optimization_goal": optimization_goal,
            "targeting": targeting,
        }
        optional = {
            "daily_budget": daily_budget,
            "lifetime_budget": lifetime_budget,
            "start_time": start_time,
            "end_time": end_time,
        }
        data.update({key: value for key, value in optional.items() if value})
        return await self._post(f"/{account_id}/adsets", data)

    async def create_ad_creative(
        self,
        account_id: str,
        *,
        name: str,
        object_story_spec: Optional[Dict[str, Any]] = None,
        degrees_of_freedom_spec: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return await self._post(
            f"/{account_id}/adcreatives",
            {
                "name": name,
                "object_story_spec": object_story_spec,
                "degrees_of_freedom_spec": degrees_of_freedom_spec,
            },
        )

    async def create_ad(
        self,
        account_id: str,
        *,
        name: str,
        adset_id: str,
        creative_id: str,
        status: str = "PAUSED",
    ) -> Any:
        return await self._post(
            f"/{account_id}/ads",
            {
                "name": name,
                "adset_id": adset_id,
                "creative": {"creative_id": creative_id},
                "status": status,
            },
        )

    async def search_interests(self, query: str, limit: int = 25) -> Any:
        return await self._get("/search", {"type": "adinterest", "q": query, "limit": limit})

    async def get_custom_audiences(self, account_id: str, limit: int = 100) -> Any:
        return await self._get(
            f"/{account_id}/customaudiences",
            {"fields": CUSTOM_AUDIENCE_FIELDS, "limit": limit},
        )

    async def create_custom_audience(
        self,
        account_id: str,
        *,
        name: str,
        subtype: str,
        description: Optional[str] = None,
        customer_file_source: Optional[str] = None,
    ) -> Any:
        return await self._post(
            f"/{account_id}/customaudiences",
            {
                "name": name,
                "subtype": subtype,
                "description": description,
                "customer_file_source": customer_file_source,
            },
        )

    async def create_lookalike_audience(
        self,
        account_id: str,
        *,
        name: str,
        origin_audience_id: str,
        lookalike_spec: Dict[str, Any],
    ) -> Any:
        return await self._post(
            f"/{account_id}/customaudiences",
            {
                "name": name,
                "subtype": "LOOKALIKE",
                "lookalike_spec": lookalike_spec,
                "origin_audience_id": origin_audience_id,
            },
        )

    async def upload_image(
        self, account_id: str, image_url: str, name: Optional[str] = None
    ) -> Any:
        data: Dict[str, Any] = {"url": image_url}
        if name:
            data["name"] = name
        return await self._post(f"/{account_id}/adimages", data)

    async def get_ad_creatives(self, account_id: str, limit: int = 50) -> Any:
        return await self._get(
            f"/{account_id}/adcreatives",
            {"fields": AD_CREATIVE_FIELDS, "limit": limit},
        )


__all__ = [
    "GRAPH_BASE_URL",
    "MetaAPIClient",
    "RemoteAPIError",
    "TIME_RANGE_SHORTCUTS",
    "resolve_time_range",
]
