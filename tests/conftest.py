"""Shared pytest fixtures for all tests."""
import pytest

from kagi_mcp.config import KagiSettings
from kagi_mcp.mcp import FunctionToolRegistry, McpServer, ServerIdentity, ToolError, text_content


@pytest.fixture
def settings():
    """Settings with retries made instant."""
    return KagiSettings(api_key="test-key", retry_backoff=0.0)


@pytest.fixture
def echo_registry():
    """Registry with an echo tool and a tool that always fails."""
    registry = FunctionToolRegistry()

    @registry.tool(
        "echo",
        "Echo a message",
        {"type": "object", "properties": {"message": {"type": "string"}}, "required": ["message"]},
    )
    async def echo(arguments):
        return [text_content(arguments.get("message", ""))]

    @registry.tool("fail", "Always fails", {"type": "object"})
    async def fail(arguments):
        raise ToolError("upstream exploded")

    return registry


@pytest.fixture
def server(echo_registry):
    return McpServer(ServerIdentity("test-server", "1.0.0"), echo_registry)
