"""Tool registry interface for the MCP server.

The server only needs a static catalog of tool descriptors and a way to
invoke a tool by name. Any object with ``list_tools`` and ``invoke`` works.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)

ContentBlock = dict[str, Any]
ToolHandler = Callable[[Any], Awaitable[list[ContentBlock]]]


class ToolError(Exception):
    """A tool reported a failure. The message is returned to the caller verbatim."""


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolRegistry(Protocol):
    def list_tools(self) -> list[ToolDescriptor]:
        ...

    async def invoke(self, name: str, arguments: Any) -> list[ContentBlock]:
        ...


def text_content(text: str) -> ContentBlock:
    return {"type": "text", "text": text}


class FunctionToolRegistry:
    """Registry backed by async handler functions.

    Usage:
        registry = FunctionToolRegistry()

        @registry.tool("echo", "Echo a message", {"type": "object"})
        async def echo(arguments):
            return [text_content(arguments["message"])]
    """

    def __init__(self) -> None:
        self._descriptors: dict[str, ToolDescriptor] = {}
        self._handlers: dict[str, ToolHandler] = {}

    def register(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any],
        handler: ToolHandler,
    ) -> None:
        if name in self._descriptors:
            raise ValueError(f"Tool already registered: {name}")
        self._descriptors[name] = ToolDescriptor(name=name, description=description, input_schema=input_schema)
        self._handlers[name] = handler

    def tool(self, name: str, description: str, input_schema: dict[str, Any]):
        def deco(fn: ToolHandler) -> ToolHandler:
            self.register(name, description, input_schema, fn)
            return fn
        return deco

    def list_tools(self) -> list[ToolDescriptor]:
        return list(self._descriptors.values())

    async def invoke(self, name: str, arguments: Any) -> list[ContentBlock]:
        handler = self._handlers.get(name)
        if handler is None:
            raise ToolError(f"Unknown tool: {name}")
        logger.debug(f"Invoking tool {name}")
        return await handler(arguments)
