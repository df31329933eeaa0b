from __future__ import annotations

import time

import pytest

from meta_ads_mcp.services import AuthorizationError, CredentialService, is_token_expired
from meta_ads_mcp.services.credentials import EXPIRY_BUFFER_SECONDS

NOW = 1_700_000_000


@pytest.mark.parametrize(
    ("remaining", "expired"),
    [
        (EXPIRY_BUFFER_SECONDS + 1, False),
        (EXPIRY_BUFFER_SECONDS, False),
        (EXPIRY_BUFFER_SECONDS - 1, True),
        (0, True),
        (-3600, True),
    ],
)
def test_expiry_uses_a_24_hour_buffer(remaining: int, expired: bool) -> None:
    assert is_token_expired(NOW + remaining, now=NOW) is expired


def _store_credential(token_store, *, expires_at: int, token: str = "stored-token") -> None:
    token_store.upsert_credential(
        user_id="u1",
        access_token=token,
        expires_at=expires_at,
        linked_resources=[{"id": "act_1", "name": "Main", "account_id": "1", "currency": "USD"}],
        now=NOW,
    )


@pytest.mark.asyncio
async def test_unknown_user_is_not_authenticated(credential_service, graph) -> None:
    with pytest.raises(AuthorizationError, match="not authenticated"):
        await credential_service.get_client("u1")

    assert graph.requests == []


@pytest.mark.asyncio
async def test_expiring_token_is_rejected(credential_service, token_store, graph) -> None:
    _store_credential(token_store, expires_at=int(time.time()) + 3600)

    with pytest.raises(AuthorizationError, match="expired"):
        await credential_service.get_client("u1")

    assert graph.requests == []


@pytest.mark.asyncio
async def test_valid_token_builds_client(credential_service, token_store, graph) -> None:
    _store_credential(token_store, expires_at=int(time.time()) + 30 * 86400)
    graph.add("GET", "/me/adaccounts", json={"data": []})

    client = await credential_service.get_client("u1")
    await client.get_ad_accounts()

    assert graph.requests[0].url.params["access_token"] == "stored-token"
    assert client.api_version == "v23.0"


@pytest.mark.asyncio
async def test_override_token_bypasses_storage(token_store, graph) -> None:
    service = CredentialService(
        token_store,
        api_version="v23.0",
        override_token="dev-token",
        transport=graph.transport,
    )
    _store_credential(token_store, expires_at=NOW - 1, token="stale")
    graph.add("GET", "/me/adaccounts", json={"data": []})

    client = await service.get_client("someone-else")
    await client.get_ad_accounts()

    assert service.uses_override_token is True
    assert graph.requests[0].url.params["access_token"] == "dev-token"


@pytest.mark.asyncio
async def test_auth_status_production_modes(credential_service, token_store) -> None:
    missing = await credential_service.auth_status("u1")
    assert missing["authenticated"] is False
    assert missing["mode"] == "production"
    assert missing["oauth_url"] == "/auth/meta"

    _store_credential(token_store, expires_at=int(time.time()) + 30 * 86400)
    status = await credential_service.auth_status("u1")

    assert status["authenticated"] is True
    assert status["token_expired"] is False
    assert status["ad_accounts_count"] == 1
    assert status["ad_accounts"] == [
        {"id": "act_1", "name": "Main", "account_id": "1", "currency": "USD"}
    ]


@pytest.mark.asyncio
async def test_auth_status_development_mode_checks_token(token_store, graph) -> None:
    service = CredentialService(
        token_store, api_version="v23.0", override_token="dev-token", transport=graph.transport
    )
    graph.add("GET", "/me/adaccounts", json={"data": [{"id": "act_9", "name": "Dev"}]})

    status = await service.auth_status("anyone")

    assert status["authenticated"] is True
    assert status["mode"] == "development"
    assert status["ad_accounts_count"] == 1
    assert graph.requests[0].url.params["limit"] == "10"


@pytest.mark.asyncio
async def test_auth_status_development_mode_reports_bad_token(token_store, graph) -> None:
    service = CredentialService(
        token_store, api_version="v23.0", override_token="dev-token", transport=graph.transport
    )
    graph.add("GET", "/me/adaccounts", status_code=401, json={"error": {"code": 190}})

    status = await service.auth_status("anyone")

    assert status["authenticated"] is False
    assert status["using_direct_token"] is True
    assert "190" in status["error"]
