"""
This module defines the query-string parameters accepted by search endpoints.
"""

from humps import camelize
from pydantic import BaseModel, ConfigDict, Field


class SearchQuery(BaseModel):
    """
    The text query language inputs of a search request.

    Field aliases are camelCase (`pageSize`) to match the query string.
    """

    search: str | None = None
    """Free-text search term, or a JSON object used as a raw condition."""
    filter: str | None = None
    """Filter string, e.g. `status:active,age:{"$gte":18}`."""
    sort: str | None = None
    """Sort string, e.g. `-createdAt,+name`."""
    page: int | None = None
    """1-based page number; pagination applies only when `page_size` is also set."""
    page_size: int | None = Field(default=None, gt=0)
    """Documents per page."""

    model_config = ConfigDict(
        alias_generator=camelize,
        populate_by_name=True,
    )
