"""Repository functions for the catalog tables.

Encapsulates all SQLAlchemy queries, keeping API and ingestion logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.orm import Session

from vodcatalog.db.schema import VodClass, VodList, utcnow
from vodcatalog.models.domain import CategoryCount, CategoryEntity, VideoEntity

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]

# A type_id filter arrives from the query string; SQLite's column affinity
# compares numeric text against the integer column.
TypeFilter = int | str | None


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _category_to_entity(row: VodClass) -> CategoryEntity:
    """Convert SQLAlchemy VodClass to domain entity."""
    return CategoryEntity(
        type_id=row.type_id,
        type_pid=row.type_pid,
        type_name=row.type_name,
        updated_at=row.updated_at,
    )


def _video_to_entity(row: VodList) -> VideoEntity:
    """Convert SQLAlchemy VodList to domain entity."""
    return VideoEntity(
        vod_id=row.vod_id,
        vod_name=row.vod_name,
        type_id=row.type_id,
        type_name=row.type_name,
        vod_en=row.vod_en,
        vod_time=row.vod_time,
        vod_remarks=row.vod_remarks,
        vod_play_from=row.vod_play_from,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _type_filter(type_id: TypeFilter) -> list:
    if type_id is None or type_id == "":
        return []
    return [VodList.type_id == type_id]


# ============================================================================
# Category Repository
# ============================================================================


def upsert_category(session: DbSession, category: CategoryEntity) -> None:
    """Insert a category or replace the row with the same type_id."""
    values = {
        "type_id": category.type_id,
        "type_pid": category.type_pid,
        "type_name": category.type_name,
        "updated_at": utcnow(),
    }
    stmt = insert(VodClass).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[VodClass.type_id],
        set_={key: stmt.excluded[key] for key in values if key != "type_id"},
    )
    session.execute(stmt)


def list_categories(session: DbSession) -> list[CategoryEntity]:
    """Get all categories ordered by (type_pid, type_id)."""
    rows = session.scalars(select(VodClass).order_by(VodClass.type_pid, VodClass.type_id)).all()
    return [_category_to_entity(r) for r in rows]


# ============================================================================
# Video Repository
# ============================================================================


def upsert_video(session: DbSession, video: VideoEntity) -> None:
    """Insert a video or replace every column of the row with the same vod_id.

    Replacement is wholesale: created_at is rewritten too, so a re-ingested
    video counts as recent.
    """
    now = utcnow()
    values = {
        "vod_id": video.vod_id,
        "vod_name": video.vod_name,
        "type_id": video.type_id,
        "type_name": video.type_name,
        "vod_en": video.vod_en,
        "vod_time": video.vod_time,
        "vod_remarks": video.vod_remarks,
        "vod_play_from": video.vod_play_from,
        "created_at": now,
        "updated_at": now,
    }
    stmt = insert(VodList).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[VodList.vod_id],
        set_={key: stmt.excluded[key] for key in values if key != "vod_id"},
    )
    session.execute(stmt)


def get_video(session: DbSession, vod_id: int) -> VideoEntity | None:
    """Get video by ID."""
    row = session.get(VodList, vod_id)
    return _video_to_entity(row) if row else None


def count_videos(session: DbSession, type_id: TypeFilter = None) -> int:
    """Count videos, optionally restricted to one category."""
    stmt = select(func.count()).select_from(VodList).where(*_type_filter(type_id))
    return session.scalar(stmt) or 0


def list_videos(
    session: DbSession,
    *,
    limit: int,
    offset: int,
    type_id: TypeFilter = None,
) -> list[VideoEntity]:
    """Get one page of videos, newest display time first."""
    stmt = (
        select(VodList)
        .where(*_type_filter(type_id))
        .order_by(VodList.vod_time.desc(), VodList.vod_id.desc())
        .limit(limit)
        .offset(offset)
    )
    return [_video_to_entity(r) for r in session.scalars(stmt).all()]


def search_videos(session: DbSession, query: str, limit: int) -> list[VideoEntity]:
    """Substring match on vod_name or vod_en, newest display time first.

    Case sensitivity follows SQLite's LIKE (ASCII case-insensitive).
    """
    pattern = f"%{query}%"
    stmt = (
        select(VodList)
        .where(or_(VodList.vod_name.like(pattern), VodList.vod_en.like(pattern)))
        .order_by(VodList.vod_time.desc())
        .limit(limit)
    )
    return [_video_to_entity(r) for r in session.scalars(stmt).all()]


def count_videos_since(session: DbSession, since: datetime) -> int:
    """Count videos whose created_at is later than ``since``."""
    stmt = select(func.count()).select_from(VodList).where(VodList.created_at > since)
    return session.scalar(stmt) or 0


def top_categories(session: DbSession, limit: int = 10) -> list[CategoryCount]:
    """Most populated category names, by video count descending."""
    count = func.count().label("count")
    stmt = (
        select(VodList.type_name, count)
        .group_by(VodList.type_name)
        .order_by(count.desc())
        .limit(limit)
    )
    return [CategoryCount(type_name=name, count=n) for name, n in session.execute(stmt).all()]
