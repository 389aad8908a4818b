"""
Pydantic models for Kagi API responses.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ResultType(int, Enum):
    """Kinds of items in a search response ``data`` array."""
    SEARCH_RESULT = 0
    RELATED_SEARCHES = 1


class SummaryType(str, Enum):
    SUMMARY = "summary"
    TAKEAWAY = "takeaway"


class EnrichSource(str, Enum):
    WEB = "web"
    NEWS = "news"


class Meta(BaseModel):
    id: Optional[str] = None
    node: Optional[str] = None
    ms: Optional[int] = None
    api_balance: Optional[float] = None


class Thumbnail(BaseModel):
    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class SearchResult(BaseModel):
    """One entry of a search or enrichment response."""
    t: int
    rank: Optional[int] = None
    url: str = "No URL"
    title: str = "No title"
    snippet: Optional[str] = None
    published: Optional[str] = None
    thumbnail: Optional[Thumbnail] = None
    # Related searches (t == 1) carry a list of query strings
    related: Optional[list[str]] = Field(None, alias="list")

    @property
    def is_result(self) -> bool:
        return self.t == ResultType.SEARCH_RESULT


class SearchResponse(BaseModel):
    meta: Meta = Field(default_factory=Meta)
    data: list[SearchResult] = Field(default_factory=list)

    def results(self) -> list[SearchResult]:
        return [item for item in self.data if item.is_result]


class SummaryData(BaseModel):
    output: str
    tokens: Optional[int] = None


class SummaryResponse(BaseModel):
    meta: Meta = Field(default_factory=Meta)
    data: SummaryData


class Reference(BaseModel):
    title: str = ""
    snippet: str = ""
    url: str = ""


class FastGPTData(BaseModel):
    output: str
    tokens: Optional[int] = None
    references: list[Reference] = Field(default_factory=list)


class FastGPTResponse(BaseModel):
    meta: Meta = Field(default_factory=Meta)
    data: FastGPTData


class ApiErrorDetail(BaseModel):
    code: Optional[int] = None
    msg: str = ""
    ref: Optional[Any] = None
