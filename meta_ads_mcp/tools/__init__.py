"""MCP tool layer."""

from .dispatcher import ToolDefinition, ToolDispatcher, UnknownToolError
from .server import create_mcp_server

__all__ = ["ToolDefinition", "ToolDispatcher", "UnknownToolError", "create_mcp_server"]
