from __future__ import annotations

import pytest

from meta_ads_mcp.tools import ToolDispatcher, create_mcp_server


class SpyDispatcher(ToolDispatcher):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls: list[tuple[str, dict]] = []

    async def call(self, name, arguments=None):
        self.calls.append((name, dict(arguments or {})))
        return "{}"


@pytest.fixture
def dispatcher(credential_service, meta_settings) -> SpyDispatcher:
    return SpyDispatcher(credential_service, meta_settings)


@pytest.mark.anyio
async def test_every_dispatcher_tool_is_registered(dispatcher) -> None:
    server = create_mcp_server(dispatcher)

    tools = await server.list_tools()

    assert {tool.name for tool in tools} == {
        definition.name for definition in dispatcher.definitions
    }
    for tool in tools:
        assert tool.description == dispatcher.get_definition(tool.name).description


@pytest.mark.anyio
async def test_input_schemas_mark_required_arguments(dispatcher) -> None:
    server = create_mcp_server(dispatcher)

    schemas = {tool.name: tool.inputSchema for tool in await server.list_tools()}

    campaign = schemas["create_campaign"]
    assert set(campaign["required"]) == {"user_id", "account_id", "name", "objective"}
    assert "status" in campaign["properties"]
    assert "user_id" not in schemas["test_connection"].get("required", [])


@pytest.mark.anyio
async def test_tool_calls_forward_without_unset_arguments(dispatcher) -> None:
    server = create_mcp_server(dispatcher)

    await server.call_tool("get_campaigns", {"user_id": "u1", "account_id": "act_1"})

    assert dispatcher.calls == [
        ("get_campaigns", {"user_id": "u1", "account_id": "act_1", "limit": 10})
    ]
