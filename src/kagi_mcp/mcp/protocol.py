"""JSON-RPC 2.0 wire types and line codec.

Every message is a single line of compact JSON. Responses carry exactly one
of ``result`` or ``error``; the constructors on :class:`Response` are the only
way to build one.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

JSONRPC_VERSION = "2.0"
MCP_PROTOCOL_VERSION = "2024-11-05"

# Error codes
PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
TOOL_ERROR = -1

_MISSING = object()


@dataclass(frozen=True)
class ErrorBody:
    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            body["data"] = self.data
        return body


class JsonRpcError(Exception):
    """Protocol-level failure that maps onto a JSON-RPC error response."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_error_body(self) -> ErrorBody:
        return ErrorBody(code=self.code, message=self.message, data=self.data)


class DecodeError(JsonRpcError):
    """Raised when a line is not a well-formed request."""

    def __init__(self, message: str) -> None:
        super().__init__(PARSE_ERROR, message)


@dataclass(frozen=True)
class Request:
    method: str
    id: Any = None
    params: Any = None
    has_params: bool = False


@dataclass(frozen=True)
class Response:
    id: Any
    result: Any = None
    error: ErrorBody | None = None

    @classmethod
    def success(cls, request_id: Any, result: Any) -> Response:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: Any, error: ErrorBody) -> Response:
        return cls(id=request_id, error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        message: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": self.id}
        if self.error is not None:
            message["error"] = self.error.to_dict()
        else:
            message["result"] = self.result
        return message


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"invalid constant {name}")


def decode(line: str) -> Request:
    """Parse one line into a :class:`Request`.

    Raises:
        DecodeError: If the line is not JSON, not an object, or has no
            string ``method``.
    """
    try:
        message = json.loads(line, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"Parse error: {e}") from e

    if not isinstance(message, dict):
        raise DecodeError("Parse error: request must be a JSON object")

    method = message.get("method")
    if not isinstance(method, str):
        raise DecodeError("Parse error: missing field `method`")

    params = message.get("params", _MISSING)
    return Request(
        method=method,
        id=message.get("id"),
        params=None if params is _MISSING else params,
        has_params=params is not _MISSING and params is not None,
    )


def encode(response: Response) -> str:
    """Serialize a response as one compact ASCII line (no trailing newline).

    Raises:
        TypeError, ValueError: If the payload is not strict JSON.
    """
    return json.dumps(
        response.to_dict(),
        allow_nan=False,
        separators=(",", ":"),
    )
