"""Kagi tool registry for the MCP server."""
from __future__ import annotations

import logging
from typing import Any

from kagi_mcp.config import SUMMARIZER_ENGINES
from kagi_mcp.kagi.client import KagiClient, KagiError
from kagi_mcp.kagi.models import EnrichSource, FastGPTData, SearchResult, SummaryType
from kagi_mcp.kagi.schemas import TOOL_SCHEMAS
from kagi_mcp.mcp.registry import ContentBlock, FunctionToolRegistry, ToolError, text_content

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


def _arguments(arguments: Any) -> dict[str, Any]:
    return arguments if isinstance(arguments, dict) else {}


def _optional_str(args: dict[str, Any], key: str) -> str | None:
    value = args.get(key)
    return value if isinstance(value, str) and value else None


def format_results(query: str, results: list[SearchResult], start: int = 1) -> str:
    """Render search results under a header, numbering from ``start``."""
    output = f"-----\nResults for search query \"{query}\":\n-----\n"
    for number, result in enumerate(results, start):
        output += (
            f"{number}: {result.title}\n"
            f"{result.url}\n"
            f"Published Date: {result.published or 'Not Available'}\n"
            f"{result.snippet or ''}\n\n"
        )
    return output


def format_answer(answer: FastGPTData) -> str:
    output = answer.output.strip()
    if answer.references:
        output += "\n\nReferences:\n"
        output += "\n".join(
            f"[{i}] {ref.title}: {ref.url}" for i, ref in enumerate(answer.references, 1)
        )
    return output


class KagiTools:
    """Tool implementations backed by a :class:`KagiClient`."""

    def __init__(self, client: KagiClient, default_engine: str | None = None) -> None:
        self.client = client
        self.default_engine = default_engine or client.settings.summarizer_engine

    def parse_engine(self, engine: str | None) -> str:
        if engine in SUMMARIZER_ENGINES:
            return engine
        return self.default_engine

    @staticmethod
    def parse_summary_type(summary_type: str | None) -> SummaryType:
        if summary_type == SummaryType.TAKEAWAY.value:
            return SummaryType.TAKEAWAY
        return SummaryType.SUMMARY

    async def search_fetch(self, arguments: Any) -> list[ContentBlock]:
        queries = _arguments(arguments).get("queries")
        if not isinstance(queries, list) or not queries:
            raise ToolError("Missing or invalid 'queries' parameter")

        sections: list[str] = []
        next_number = 1
        for query in queries:
            if not isinstance(query, str):
                raise ToolError("Invalid query format - expected string")
            try:
                response = await self.client.search(query, limit=SEARCH_LIMIT)
            except KagiError as e:
                raise ToolError(f"Search failed for query '{query}': {e}") from e

            results = response.results()
            sections.append(format_results(query, results, start=next_number))
            next_number += len(results)

        return [text_content("\n".join(sections))]

    async def summarize(self, arguments: Any) -> list[ContentBlock]:
        args = _arguments(arguments)
        url = _optional_str(args, "url")
        if url is None:
            raise ToolError("Missing 'url' parameter")

        engine = self.parse_engine(_optional_str(args, "engine"))
        summary_type = self.parse_summary_type(_optional_str(args, "summary_type"))
        try:
            summary = await self.client.summarize(
                url=url,
                engine=engine,
                summary_type=summary_type,
                target_language=_optional_str(args, "target_language"),
            )
        except KagiError as e:
            raise ToolError(f"Summarization failed: {e}") from e

        return [text_content(summary.output)]

    async def fastgpt(self, arguments: Any) -> list[ContentBlock]:
        query = _optional_str(_arguments(arguments), "query")
        if query is None:
            raise ToolError("Missing 'query' parameter")

        try:
            answer = await self.client.fastgpt(query)
        except KagiError as e:
            raise ToolError(f"FastGPT failed: {e}") from e

        return [text_content(format_answer(answer))]

    async def enrich(self, arguments: Any) -> list[ContentBlock]:
        args = _arguments(arguments)
        query = _optional_str(args, "query")
        if query is None:
            raise ToolError("Missing 'query' parameter")

        source_name = _optional_str(args, "source") or EnrichSource.WEB.value
        try:
            source = EnrichSource(source_name)
        except ValueError:
            raise ToolError(f"Invalid source '{source_name}' - expected 'web' or 'news'") from None

        try:
            response = await self.client.enrich(query, source=source)
        except KagiError as e:
            raise ToolError(f"Enrichment failed for query '{query}': {e}") from e

        return [text_content(format_results(query, response.results()))]


def build_registry(tools: KagiTools) -> FunctionToolRegistry:
    """Register the Kagi tools, in catalog order."""
    registry = FunctionToolRegistry()
    handlers = {
        "kagi_search_fetch": tools.search_fetch,
        "kagi_summarizer": tools.summarize,
        "kagi_fastgpt": tools.fastgpt,
        "kagi_enrich": tools.enrich,
    }
    for name, handler in handlers.items():
        schema = TOOL_SCHEMAS[name]
        registry.register(name, schema["description"], schema["inputSchema"], handler)

    logger.debug(f"Registered Kagi tools: {', '.join(handlers)}")
    return registry
