"""Pydantic models for the upstream feed and the HTTP API.

Upstream models mirror the listing API's JSON; API models mirror the
response envelopes clients consume (field names are the wire names).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

DataT = TypeVar("DataT")


# ============================================================================
# Upstream feed
# ============================================================================


class UpstreamCategory(BaseModel):
    """Category row from the first page of the feed."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    type_id: int
    type_pid: int | None = 0
    type_name: str


class UpstreamVideo(BaseModel):
    """Video row from the feed.

    Validated one record at a time during ingestion, so a malformed
    record only costs that record.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    vod_id: int
    vod_name: str
    type_id: int | None = None
    type_name: str | None = None
    vod_en: str | None = None
    vod_time: str | None = None
    vod_remarks: str | None = None
    vod_play_from: str | None = None


class UpstreamPage(BaseModel):
    """One page of the listing API (``?ac=list&pg=N``).

    ``code``, ``pagecount`` and ``class`` are read leniently: an unusable
    ``code`` means the page is not ok, an unusable ``pagecount`` counts as
    missing, and categories are validated where they are saved (page 1
    only).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    code: int | None = None
    pagecount: int | None = None
    videos: list[Any] | None = Field(default=None, alias="list")
    categories: list[Any] | None = Field(default=None, alias="class")

    @field_validator("code", "pagecount", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any) -> int | None:
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return None

    @property
    def ok(self) -> bool:
        """Upstream reported success and returned at least one video."""
        return self.code == 1 and bool(self.videos)


# ============================================================================
# HTTP API
# ============================================================================


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: DataT


class ErrorResponse(BaseModel):
    """Failure envelope: ``{"success": false, "error": ...}``."""

    success: bool = False
    error: str


class VideoRecord(BaseModel):
    """A stored video as returned to clients."""

    vod_id: int
    vod_name: str
    type_id: int | None
    type_name: str | None
    vod_en: str | None
    vod_time: str | None
    vod_remarks: str | None
    vod_play_from: str | None
    created_at: datetime | None
    updated_at: datetime | None


class CategoryRecord(BaseModel):
    """A stored category as returned to clients."""

    type_id: int
    type_pid: int
    type_name: str
    updated_at: datetime | None


class CategoryNode(CategoryRecord):
    """Category with its child categories."""

    children: list[CategoryNode] = Field(default_factory=list)


class Pagination(BaseModel):
    """Pagination block of the list endpoint."""

    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


class VideoListData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    videos: list[VideoRecord] = Field(alias="list")
    categories: list[CategoryRecord] = Field(alias="class")
    pagination: Pagination


class SearchData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    videos: list[VideoRecord] = Field(alias="list")
    # Number of rows returned, not the number of rows matching.
    total: int
    query: str


class ClassData(BaseModel):
    flat: list[CategoryRecord]
    tree: list[CategoryNode]


class CategoryCountRecord(BaseModel):
    type_name: str | None
    count: int


class StatsData(BaseModel):
    totalVideos: int
    recentVideos: int
    topCategories: list[CategoryCountRecord]
    updatedAt: str


class CollectResponse(BaseModel):
    """Manual collection result."""

    message: str
    pagesCollected: int


class MessageResponse(BaseModel):
    message: str
