"""MCP request dispatcher.

Routes parsed JSON-RPC requests to ``initialize``, ``tools/list`` and
``tools/call`` handlers. Handlers return a result payload or raise
:class:`JsonRpcError`; :meth:`McpServer.handle_request` turns either outcome
into a :class:`Response`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from kagi_mcp.mcp.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    MCP_PROTOCOL_VERSION,
    METHOD_NOT_FOUND,
    TOOL_ERROR,
    DecodeError,
    ErrorBody,
    JsonRpcError,
    Request,
    Response,
    decode,
)
from kagi_mcp.mcp.registry import ToolDescriptor, ToolError, ToolRegistry

logger = logging.getLogger(__name__)

MethodHandler = Callable[[Request], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class ServerIdentity:
    name: str
    version: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "version": self.version}


class McpServer:
    """Stateless MCP dispatcher over an injected tool registry."""

    def __init__(self, identity: ServerIdentity, registry: ToolRegistry) -> None:
        self.identity = identity
        self._registry = registry
        self._tools: tuple[ToolDescriptor, ...] = tuple(registry.list_tools())

        names = [t.name for t in self._tools]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate tool names: {', '.join(duplicates)}")
        self._tool_names = frozenset(names)

        self._methods: dict[str, MethodHandler] = {
            "initialize": self._handle_initialize,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
        }

    @property
    def tools(self) -> tuple[ToolDescriptor, ...]:
        return self._tools

    async def handle_line(self, line: str) -> Response:
        """Decode and dispatch one input line."""
        try:
            request = decode(line)
        except DecodeError as e:
            logger.warning(f"Rejecting malformed request: {e.message}")
            return Response.failure(None, e.to_error_body())
        return await self.handle_request(request)

    async def handle_request(self, request: Request) -> Response:
        """Handle a single JSON-RPC request.

        Returns:
            Response carrying either the handler's result or an error body
        """
        handler = self._methods.get(request.method)
        try:
            if handler is None:
                raise JsonRpcError(METHOD_NOT_FOUND, f"Method not found: {request.method}")
            result = await handler(request)
        except JsonRpcError as e:
            return Response.failure(request.id, e.to_error_body())
        except Exception as e:
            logger.exception(f"Unhandled error while processing {request.method}")
            return Response.failure(request.id, ErrorBody(INTERNAL_ERROR, f"Internal error: {e}"))

        return Response.success(request.id, result)

    async def _handle_initialize(self, request: Request) -> dict[str, Any]:
        return {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": {
                "tools": {}
            },
            "serverInfo": self.identity.to_dict(),
        }

    async def _handle_tools_list(self, request: Request) -> dict[str, Any]:
        return {"tools": [tool.to_dict() for tool in self._tools]}

    async def _handle_tools_call(self, request: Request) -> dict[str, Any]:
        if not request.has_params:
            raise JsonRpcError(INVALID_PARAMS, "Missing parameters")

        params = request.params if isinstance(request.params, dict) else {}
        tool_name = params.get("name")
        if not isinstance(tool_name, str):
            raise JsonRpcError(INVALID_PARAMS, "Missing name parameter")
        if "arguments" not in params:
            raise JsonRpcError(INVALID_PARAMS, "Missing arguments parameter")

        if tool_name not in self._tool_names:
            raise JsonRpcError(METHOD_NOT_FOUND, f"Unknown tool: {tool_name}")

        try:
            content = await self._registry.invoke(tool_name, params["arguments"])
        except ToolError as e:
            logger.info(f"Tool {tool_name} failed: {e}")
            raise JsonRpcError(TOOL_ERROR, str(e)) from e

        return {"content": list(content)}
