"""Model Context Protocol server core: codec, dispatcher and stdio transport."""
from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    MCP_PROTOCOL_VERSION,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    TOOL_ERROR,
    DecodeError,
    ErrorBody,
    JsonRpcError,
    Request,
    Response,
    decode,
    encode,
)
from .registry import (
    ContentBlock,
    FunctionToolRegistry,
    ToolDescriptor,
    ToolError,
    ToolRegistry,
    text_content,
)
from .server import McpServer, ServerIdentity
from .transport import run_stdio_server, tolerant_reader

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "MCP_PROTOCOL_VERSION",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "TOOL_ERROR",
    "ContentBlock",
    "DecodeError",
    "ErrorBody",
    "FunctionToolRegistry",
    "JsonRpcError",
    "McpServer",
    "Request",
    "Response",
    "ServerIdentity",
    "ToolDescriptor",
    "ToolError",
    "ToolRegistry",
    "decode",
    "encode",
    "run_stdio_server",
    "text_content",
    "tolerant_reader",
]
