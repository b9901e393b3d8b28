"""Search query and result models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class SearchQuery(BaseModel):
    """A query against one index."""

    keys: str | None = Field(default=None, description="Fulltext keys; None matches all documents")
    fields: list[str] | None = Field(default=None, description="Fulltext fields to search (None = all)")
    conditions: dict[str, Any] = Field(default_factory=dict, description="Field equality filters")
    sorts: list[tuple[str, Literal["asc", "desc"]]] = Field(default_factory=list, description="(field, order) pairs")
    offset: int = Field(default=0, ge=0, description="Number of results to skip")
    limit: int = Field(default=10, ge=0, le=10000, description="Maximum number of results to return")


class ResultItem(BaseModel):
    """A single matching item."""

    id: str = Field(description="Item id")
    score: float = Field(default=0.0, description="Relevance score")
    fields: dict[str, Any] = Field(default_factory=dict, description="Stored field values")


class SearchResults(BaseModel):
    """Results of a search."""

    result_count: int = Field(default=0, description="Total number of matching items")
    items: list[ResultItem] = Field(default_factory=list, description="Matching items in the requested page")
    took_ms: int = Field(default=0, description="Cluster query execution time in ms")
