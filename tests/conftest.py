"""Pytest configuration and fixtures shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from urllib.parse import parse_qs

import httpx
import pytest

from meta_ads_mcp.clients import SQLiteCredentialStore, SQLiteStateStore
from meta_ads_mcp.core.config import MetaSettings
from meta_ads_mcp.services import CredentialService, TokenCipherService, TokenStore


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class GraphRecorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], tuple[int, dict]] = {}

    def add(self, method: str, path_suffix: str, status_code: int = 200, **kwargs) -> None:
        self.routes[(method, path_suffix)] = (status_code, kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (method, suffix), (status_code, kwargs) in self.routes.items():
            if request.method == method and request.url.path.endswith(suffix):
                return httpx.Response(status_code, **kwargs)
        return httpx.Response(404, json={"error": {"message": f"no route for {request.url.path}"}})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @staticmethod
    def form(request: httpx.Request) -> dict[str, str]:
        return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def graph() -> GraphRecorder:
    return GraphRecorder()


@pytest.fixture
def meta_settings() -> MetaSettings:
    return MetaSettings(
        app_id="app-123",
        app_secret="app-secret",
        redirect_uri="https://ads.example.com/auth/callback",
        access_token=None,
    )


@pytest.fixture
def token_store(tmp_path) -> TokenStore:
    store = SQLiteCredentialStore(str(tmp_path / "tokens.db"))
    return TokenStore(store, TokenCipherService(secret="unit-test-secret"))


@pytest.fixture
def state_store(tmp_path, clock) -> SQLiteStateStore:
    return SQLiteStateStore(str(tmp_path / "states.db"), clock=clock)


@pytest.fixture
def credential_service(token_store, graph) -> CredentialService:
    return CredentialService(token_store, api_version="v23.0", transport=graph.transport)
