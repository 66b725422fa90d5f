"""Database schema for the VOD catalog.

Two tables: the category tree (vod_class) and the video list (vod_list).
Parent links in vod_class are intentionally not foreign keys; orphaned
categories are tolerated and dropped when the tree is assembled.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class VodClass(Base):
    """A node in the category tree (type_pid == 0 for roots)."""

    __tablename__ = "vod_class"

    type_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    type_pid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    type_name: Mapped[str] = mapped_column(String(128), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class VodList(Base):
    """One catalog entry.

    Invariant: vod_id is unique; re-ingesting the same id replaces the row.
    """

    __tablename__ = "vod_list"

    vod_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    vod_name: Mapped[str] = mapped_column(String(255), nullable=False)
    type_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    type_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    vod_en: Mapped[str | None] = mapped_column(String(255), nullable=True, default="")
    vod_time: Mapped[str | None] = mapped_column(String(19), nullable=True, index=True)
    vod_remarks: Mapped[str | None] = mapped_column(String(255), nullable=True, default="")
    vod_play_from: Mapped[str | None] = mapped_column(Text, nullable=True, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
