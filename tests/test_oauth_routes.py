try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from meta_ads_mcp.clients import MetaOAuthClient
from meta_ads_mcp.main import app
from meta_ads_mcp.services import CredentialService, OAuthFlowController

ACCOUNTS = [
    {"id": f"act_{index}", "name": f"Account <{index}>", "account_id": str(index)}
    for index in range(1, 8)
]


def _fake_meta(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/oauth/access_token"):
        if request.url.params.get("code") == "bad":
            return httpx.Response(400, json={"error": {"message": "code expired"}})
        if request.url.params.get("grant_type") == "fb_exchange_token":
            return httpx.Response(200, json={"access_token": "LLT", "expires_in": 5_184_000})
        return httpx.Response(200, json={"access_token": "SLT", "expires_in": 3600})
    if request.url.path.endswith("/me/adaccounts"):
        return httpx.Response(200, json={"data": ACCOUNTS})
    return httpx.Response(404)


@pytest.fixture()
def flow_override(meta_settings, state_store, token_store, clock):
    from meta_ads_mcp import dependencies

    transport = httpx.MockTransport(_fake_meta)
    flow = OAuthFlowController(
        oauth_client=MetaOAuthClient(meta_settings, transport=transport),
        state_store=state_store,
        token_store=token_store,
        credentials=CredentialService(token_store, api_version="v23.0", transport=transport),
        clock=clock,
    )
    app.dependency_overrides[dependencies.get_oauth_flow] = lambda: flow

    yield flow

    app.dependency_overrides.clear()


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")


async def _start(client: httpx.AsyncClient, user_id: str = "u1") -> str:
    response = await client.get("/auth/meta", params={"user_id": user_id})
    return parse_qs(urlparse(response.headers["location"]).query)["state"][0]


@pytest.mark.anyio
async def test_health_reports_configuration() -> None:
    async with _client() as client:
        response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"] == "2.0.0"
    assert body["meta_app_configured"] is True
    assert body["endpoints"]["oauth_callback"] == "/auth/callback"


@pytest.mark.anyio
async def test_index_lists_endpoints() -> None:
    async with _client() as client:
        response = await client.get("/")

    paths = {endpoint["path"] for endpoint in response.json()["endpoints"]}
    assert {"/health", "/sse", "/mcp", "/auth/callback", "/auth/disconnect"} <= paths


@pytest.mark.anyio
async def test_start_redirects_to_consent_dialog(flow_override, state_store) -> None:
    async with _client() as client:
        response = await client.get("/auth/meta", params={"user_id": "u1"})

    assert response.status_code == 302
    location = urlparse(response.headers["location"])
    assert location.netloc == "www.facebook.com"
    state = parse_qs(location.query)["state"][0]
    assert state_store.get(state) == "u1"


@pytest.mark.anyio
async def test_start_defaults_user_id(flow_override, state_store) -> None:
    async with _client() as client:
        response = await client.get("/auth/meta")

    state = parse_qs(urlparse(response.headers["location"]).query)["state"][0]

    assert state_store.get(state) == "default-user"


@pytest.mark.anyio
async def test_callback_success_renders_confirmation(flow_override, token_store) -> None:
    async with _client() as client:
        state = await _start(client)
        response = await client.get("/auth/callback", params={"code": "C", "state": state})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Found 7 Ad Account(s)" in response.text
    assert "Token expires in 60 days" in response.text
    assert "Account &lt;5&gt;" in response.text
    assert "Account &lt;6&gt;" not in response.text
    assert token_store.get_credential("u1").access_token == "LLT"


@pytest.mark.anyio
async def test_callback_replay_is_rejected(flow_override) -> None:
    async with _client() as client:
        state = await _start(client)
        await client.get("/auth/callback", params={"code": "C", "state": state})
        response = await client.get("/auth/callback", params={"code": "C", "state": state})

    assert response.status_code == 400
    assert response.json() == {
        "error": "invalid_state",
        "message": "Invalid or expired state parameter",
    }


@pytest.mark.anyio
async def test_callback_provider_error(flow_override) -> None:
    async with _client() as client:
        response = await client.get(
            "/auth/callback",
            params={"error": "access_denied", "error_description": "User denied"},
        )

    assert response.status_code == 400
    assert response.json() == {"error": "oauth_error", "message": "User denied"}


@pytest.mark.anyio
async def test_callback_missing_parameters(flow_override) -> None:
    async with _client() as client:
        response = await client.get("/auth/callback", params={"code": "C"})

    assert response.status_code == 400
    assert response.json()["error"] == "missing_parameters"


@pytest.mark.anyio
async def test_callback_exchange_failure_is_server_error(flow_override, token_store) -> None:
    async with _client() as client:
        state = await _start(client)
        response = await client.get("/auth/callback", params={"code": "bad", "state": state})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "token_exchange_failed"
    assert "code expired" in body["message"]
    assert token_store.get_credential("u1") is None


@pytest.mark.anyio
async def test_disconnect_twice(flow_override) -> None:
    async with _client() as client:
        state = await _start(client)
        await client.get("/auth/callback", params={"code": "C", "state": state})
        first = await client.post("/auth/disconnect", json={"user_id": "u1"})
        second = await client.post("/auth/disconnect", json={"user_id": "u1"})

    assert first.json() == {"success": True, "message": "Account disconnected"}
    assert second.status_code == 200
    assert second.json() == {"success": False, "message": "No connected account found"}


@pytest.mark.anyio
async def test_disconnect_requires_user_id(flow_override) -> None:
    async with _client() as client:
        response = await client.post("/auth/disconnect", json={})

    assert response.status_code == 422
