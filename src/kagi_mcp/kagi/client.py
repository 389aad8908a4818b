"""Kagi API client.

Async client for the Kagi Search, Universal Summarizer, FastGPT and
Enrichment APIs.

References:
- https://help.kagi.com/kagi/api/search.html
- https://help.kagi.com/kagi/api/summarizer.html
- https://help.kagi.com/kagi/api/fastgpt.html
- https://help.kagi.com/kagi/api/enrich.html
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from kagi_mcp.config import KagiSettings
from kagi_mcp.kagi.models import (
    ApiErrorDetail,
    EnrichSource,
    FastGPTData,
    FastGPTResponse,
    SearchResponse,
    SummaryData,
    SummaryResponse,
    SummaryType,
)

logger = logging.getLogger(__name__)

# Statuses worth retrying
RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


class KagiError(Exception):
    """Base class for Kagi client failures."""


class KagiAPIError(KagiError):
    """The API answered with a non-success status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"API error: {status} - {message}")
        self.status = status
        self.message = message


class KagiResponseError(KagiError):
    """The API answered with a body that could not be understood."""


def _error_message(response: httpx.Response) -> str:
    """Extract a readable message from a Kagi error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase

    errors = body.get("error") if isinstance(body, dict) else None
    if isinstance(errors, list) and errors:
        try:
            details = [ApiErrorDetail.model_validate(e) for e in errors]
        except ValidationError:
            return response.text.strip()
        return "; ".join(d.msg for d in details if d.msg) or response.text.strip()
    return response.text.strip()


class KagiClient:
    """Kagi API client configured from :class:`KagiSettings`.

    Args:
        settings: API key, base URL, API versions and retry policy
        transport: Optional httpx transport (used for testing)
    """

    def __init__(self, settings: KagiSettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bot {self.settings.api_key}"}

    async def _request(
        self,
        method: str,
        url: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        max_retries = self.settings.max_retries

        for attempt in range(max_retries + 1):
            try:
                async with httpx.AsyncClient(timeout=self.settings.timeout, transport=self._transport) as client:
                    response = await client.request(
                        method, url, headers=self._headers, json=json, params=params
                    )
            except httpx.TransportError as e:
                if attempt < max_retries:
                    delay = self.settings.retry_backoff * (2 ** attempt)
                    logger.warning(f"{method} {url} failed ({e!r}), retrying in {delay:.1f}s")
                    await asyncio.sleep(delay)
                    continue
                raise KagiError(f"HTTP request failed: {e}") from e

            if response.status_code in RETRY_STATUSES and attempt < max_retries:
                delay = self.settings.retry_backoff * (2 ** attempt)
                logger.warning(f"{method} {url} returned {response.status_code}, retrying in {delay:.1f}s")
                await asyncio.sleep(delay)
                continue

            if not response.is_success:
                raise KagiAPIError(response.status_code, _error_message(response))

            try:
                return response.json()
            except ValueError as e:
                raise KagiResponseError(f"Invalid JSON from {url}: {e}") from e

        # Unreachable: the final attempt either returns or raises
        raise KagiError(f"{method} {url} exhausted retries")

    @staticmethod
    def _parse(model: type[BaseModel], body: Any) -> Any:
        try:
            return model.model_validate(body)
        except ValidationError as e:
            raise KagiResponseError(f"Unexpected response shape: {e}") from e

    async def search(self, query: str, limit: int | None = 10) -> SearchResponse:
        """Search the web using Kagi's Search API.

        Args:
            query: The search query
            limit: Maximum number of results

        Returns:
            Parsed search response

        Raises:
            KagiError: If the request fails
        """
        payload: dict[str, Any] = {"q": query}
        if limit is not None:
            payload["limit"] = limit

        url = self.settings.endpoint(self.settings.search_api_version, "search")
        body = await self._request("POST", url, json=payload)
        return self._parse(SearchResponse, body)

    async def summarize(
        self,
        url: str | None = None,
        text: str | None = None,
        engine: str | None = None,
        summary_type: SummaryType | None = None,
        target_language: str | None = None,
    ) -> SummaryData:
        """Summarize a URL or a block of text with the Universal Summarizer.

        Exactly one of ``url`` or ``text`` must be given.
        """
        if (url is None) == (text is None):
            raise ValueError("Provide exactly one of url or text")

        payload: dict[str, Any] = {"url": url} if url is not None else {"text": text}
        if engine:
            payload["engine"] = engine
        if summary_type:
            payload["summary_type"] = SummaryType(summary_type).value
        if target_language:
            payload["target_language"] = target_language

        endpoint = self.settings.endpoint(self.settings.summarizer_api_version, "summarize")
        body = await self._request("POST", endpoint, json=payload)
        return self._parse(SummaryResponse, body).data

    async def fastgpt(self, query: str, cache: bool = True) -> FastGPTData:
        """Answer a question with FastGPT (web-search backed)."""
        payload = {"query": query, "cache": cache, "web_search": True}
        endpoint = self.settings.endpoint(self.settings.fastgpt_api_version, "fastgpt")
        body = await self._request("POST", endpoint, json=payload)
        return self._parse(FastGPTResponse, body).data

    async def enrich(self, query: str, source: EnrichSource = EnrichSource.WEB) -> SearchResponse:
        """Query the Teclis (web) or TinyGem (news) enrichment indexes."""
        source = EnrichSource(source)
        endpoint = self.settings.endpoint(self.settings.enrich_api_version, f"enrich/{source.value}")
        body = await self._request("GET", endpoint, params={"q": query})
        return self._parse(SearchResponse, body)
