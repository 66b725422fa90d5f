"""Normalization of upstream records before they are stored."""

from __future__ import annotations

from datetime import datetime, timezone

from vodcatalog.models.domain import CategoryEntity, VideoEntity
from vodcatalog.models.types import UpstreamCategory, UpstreamVideo

VOD_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Tried in order after ISO-8601 parsing fails.
_FALLBACK_FORMATS = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
)


def parse_vod_time(value: str) -> datetime | None:
    """Parse an upstream timestamp into a naive UTC datetime.

    Values carrying an offset are converted to UTC; naive values are
    taken as UTC already.

    Returns:
        The parsed datetime, or None if no known format matches.
    """
    text = value.strip()
    if not text:
        return None

    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _FALLBACK_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def normalize_vod_time(value: str | None, now: datetime | None = None) -> str | None:
    """Reformat an upstream timestamp as ``YYYY-MM-DD HH:MM:SS``.

    Missing values stay missing. Unparseable values are replaced by the
    current UTC time.

    Args:
        value: Raw upstream value.
        now: Substitute for the current time (tests).

    Returns:
        Normalized timestamp string or None.
    """
    if not value:
        return None

    parsed = parse_vod_time(value)
    if parsed is None:
        parsed = now or datetime.now(timezone.utc).replace(tzinfo=None)
    return parsed.strftime(VOD_TIME_FORMAT)


def category_from_upstream(category: UpstreamCategory) -> CategoryEntity:
    """Map a feed category to a storable entity (missing parent -> root)."""
    return CategoryEntity(
        type_id=category.type_id,
        type_pid=category.type_pid or 0,
        type_name=category.type_name,
    )


def video_from_upstream(video: UpstreamVideo, now: datetime | None = None) -> VideoEntity:
    """Map a feed video to a storable entity.

    Optional text fields default to the empty string.
    """
    return VideoEntity(
        vod_id=video.vod_id,
        vod_name=video.vod_name,
        type_id=video.type_id,
        type_name=video.type_name,
        vod_en=video.vod_en or "",
        vod_time=normalize_vod_time(video.vod_time, now),
        vod_remarks=video.vod_remarks or "",
        vod_play_from=video.vod_play_from or "",
    )
