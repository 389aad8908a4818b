"""Tests for the Kagi API client with mocked HTTP responses."""
import json

import httpx
import pytest

from kagi_mcp.kagi.client import KagiAPIError, KagiClient, KagiError, KagiResponseError
from kagi_mcp.kagi.models import EnrichSource, SummaryType

SEARCH_BODY = {
    "meta": {"id": "abc", "node": "us-east", "ms": 120, "api_balance": 9.5},
    "data": [
        {"t": 0, "rank": 1, "url": "https://a.example", "title": "A", "snippet": "first", "published": "2024-01-01T00:00:00Z"},
        {"t": 0, "rank": 2, "url": "https://b.example", "title": "B", "snippet": "second"},
        {"t": 1, "list": ["related one", "related two"]},
    ],
}


def make_client(settings, handler):
    return KagiClient(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_search_request_and_parsing(settings):
    """Test that search posts the query with Bot auth and parses results."""
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=SEARCH_BODY)

    response = await make_client(settings, handler).search("rust programming", limit=10)

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://kagi.com/api/v0/search"
    assert request.headers["Authorization"] == "Bot test-key"
    assert json.loads(request.content) == {"q": "rust programming", "limit": 10}

    assert response.meta.api_balance == 9.5
    assert [r.title for r in response.results()] == ["A", "B"]
    assert response.data[2].related == ["related one", "related two"]


@pytest.mark.asyncio
async def test_api_version_in_url(settings):
    """Test that per-endpoint API versions are used in the URL."""
    settings = settings.model_copy(update={"search_api_version": "v1"})
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json={"meta": {}, "data": []})

    await make_client(settings, handler).search("q")
    assert seen == ["https://kagi.com/api/v1/search"]


@pytest.mark.asyncio
async def test_summarize_payload(settings):
    """Test summarizer request body and output extraction."""
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"meta": {"api_balance": 1.0}, "data": {"output": "Short.", "tokens": 12}})

    summary = await make_client(settings, handler).summarize(
        url="https://example.com/post",
        engine="agnes",
        summary_type=SummaryType.TAKEAWAY,
        target_language="EN",
    )

    assert summary.output == "Short."
    assert summary.tokens == 12
    assert bodies == [{
        "url": "https://example.com/post",
        "engine": "agnes",
        "summary_type": "takeaway",
        "target_language": "EN",
    }]


@pytest.mark.asyncio
async def test_summarize_text(settings):
    """Test summarizing raw text instead of a URL."""
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"meta": {}, "data": {"output": "ok"}})

    await make_client(settings, handler).summarize(text="Some long text")
    assert bodies == [{"text": "Some long text"}]


@pytest.mark.asyncio
async def test_summarize_requires_exactly_one_source(settings):
    client = make_client(settings, lambda request: httpx.Response(200))
    with pytest.raises(ValueError):
        await client.summarize()
    with pytest.raises(ValueError):
        await client.summarize(url="https://x", text="y")


@pytest.mark.asyncio
async def test_fastgpt(settings):
    """Test FastGPT request and reference parsing."""
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={
            "meta": {},
            "data": {
                "output": "Python 3.13 was released in October 2024 [1].",
                "tokens": 50,
                "references": [{"title": "Release", "snippet": "...", "url": "https://python.org"}],
            },
        })

    answer = await make_client(settings, handler).fastgpt("When was Python 3.13 released?")

    assert bodies == [{"query": "When was Python 3.13 released?", "cache": True, "web_search": True}]
    assert answer.references[0].url == "https://python.org"


@pytest.mark.asyncio
async def test_enrich_news_uses_get(settings):
    """Test that enrichment issues a GET with the query string."""
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"meta": {}, "data": [{"t": 0, "url": "https://n", "title": "N"}]})

    response = await make_client(settings, handler).enrich("solar", source=EnrichSource.NEWS)

    assert seen[0].method == "GET"
    assert seen[0].url.path == "/api/v0/enrich/news"
    assert seen[0].url.params["q"] == "solar"
    assert response.results()[0].title == "N"


@pytest.mark.asyncio
async def test_api_error_message_extracted(settings):
    """Test that Kagi's error body becomes the exception message, without retry."""
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(401, json={"meta": {}, "data": None, "error": [{"code": 1, "msg": "Unauthorized"}]})

    with pytest.raises(KagiAPIError) as exc_info:
        await make_client(settings, handler).search("q")

    assert exc_info.value.status == 401
    assert exc_info.value.message == "Unauthorized"
    assert "401" in str(exc_info.value)
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_retry_on_server_error(settings):
    """Test that a 503 is retried and a later success returned."""
    responses = [
        httpx.Response(503, text="busy"),
        httpx.Response(200, json={"meta": {}, "data": []}),
    ]
    calls = []

    def handler(request):
        calls.append(request)
        return responses[len(calls) - 1]

    response = await make_client(settings, handler).search("q")

    assert len(calls) == 2
    assert response.data == []


@pytest.mark.asyncio
async def test_retries_exhausted(settings):
    """Test that the final failing status is raised after max_retries."""
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(KagiAPIError) as exc_info:
        await make_client(settings, handler).search("q")

    assert exc_info.value.status == 502
    assert exc_info.value.message == "bad gateway"
    assert len(calls) == settings.max_retries + 1


@pytest.mark.asyncio
async def test_transport_error_wrapped(settings):
    """Test that connection failures become KagiError after retries."""
    settings = settings.model_copy(update={"max_retries": 1})
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(KagiError, match="HTTP request failed"):
        await make_client(settings, handler).search("q")
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_invalid_json_body(settings):
    """Test that a non-JSON success body raises KagiResponseError."""
    def handler(request):
        return httpx.Response(200, text="<html>")

    with pytest.raises(KagiResponseError):
        await make_client(settings, handler).search("q")


@pytest.mark.asyncio
async def test_unexpected_shape(settings):
    """Test that a body missing required fields raises KagiResponseError."""
    def handler(request):
        return httpx.Response(200, json={"meta": {}, "data": {"tokens": 3}})

    with pytest.raises(KagiResponseError):
        await make_client(settings, handler).summarize(url="https://x")
