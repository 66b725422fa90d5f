"""Domain models for the VOD catalog.

Pure Python dataclasses representing stored entities.
These models are independent of SQLAlchemy and are what the
repository hands back to the API and ingestion layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class CategoryEntity:
    """Domain model for a category node."""

    type_id: int
    type_pid: int
    type_name: str
    updated_at: datetime | None = None


@dataclass
class VideoEntity:
    """Domain model for a catalog entry."""

    vod_id: int
    vod_name: str
    type_id: int | None
    type_name: str | None
    vod_en: str | None = ""
    vod_time: str | None = None
    vod_remarks: str | None = ""
    vod_play_from: str | None = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class CategoryCount:
    """Number of videos carrying a (denormalized) category name."""

    type_name: str | None
    count: int
