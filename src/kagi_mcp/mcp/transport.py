"""Line-oriented stdio transport for the MCP server.

Reads JSON-RPC requests from an input stream (one per line) and writes
responses to an output stream (one per line). Requests are processed strictly
in order: the next line is not read until the previous response is flushed.
"""
from __future__ import annotations

import io
import logging
import sys
from typing import TextIO

from kagi_mcp.mcp.protocol import INTERNAL_ERROR, ErrorBody, Response, encode
from kagi_mcp.mcp.server import McpServer

logger = logging.getLogger(__name__)


def tolerant_reader(stream: TextIO) -> TextIO:
    """Re-wrap a text stream so invalid UTF-8 never raises on read.

    Undecodable bytes become lone surrogates, which then fail JSON decoding
    and get a parse error response. Streams without an underlying binary
    buffer are returned unchanged.
    """
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        return stream
    return io.TextIOWrapper(buffer, encoding="utf-8", errors="surrogateescape")


def _encode_or_internal_error(response: Response) -> str:
    try:
        return encode(response)
    except (TypeError, ValueError, RecursionError) as e:
        logger.error(f"Failed to encode response for id={response.id!r}: {e}")
        error = ErrorBody(INTERNAL_ERROR, f"Internal error: {e}")
        try:
            return encode(Response.failure(response.id, error))
        except (TypeError, ValueError):
            return encode(Response.failure(None, error))


async def run_stdio_server(
    server: McpServer,
    reader: TextIO | None = None,
    writer: TextIO | None = None,
) -> int:
    """Run the read-dispatch-write loop until end of input.

    Args:
        server: Dispatcher handling each request
        reader: Input stream (defaults to stdin, decoded leniently)
        writer: Output stream (defaults to stdout)

    Returns:
        Number of requests answered

    Raises:
        OSError: If writing or flushing a response fails
    """
    reader = reader or tolerant_reader(sys.stdin)
    writer = writer or sys.stdout

    logger.info(f"{server.identity.name} {server.identity.version} starting on stdio...")
    logger.info(f"Available tools: {', '.join(t.name for t in server.tools)}")

    handled = 0
    while True:
        line = reader.readline()
        if not line:
            # EOF - client disconnected
            break

        line = line.strip()
        if not line:
            continue

        response = await server.handle_line(line)
        payload = _encode_or_internal_error(response)

        writer.write(payload + "\n")
        writer.flush()
        handled += 1

    logger.info(f"Input closed after {handled} request(s), shutting down")
    return handled
