"""Read API endpoints.

GET /api/vod/list - Paginated video list
GET /api/vod/detail/{id} - Single video
GET /api/vod/search - Substring search on name / English name
GET /api/vod/class - Categories, flat and as a tree
GET /api/vod/stats - Aggregate counts

Every handler here is read-only and ignores the request method.
Unexpected failures are logged and answered with a generic 500; the
cause never reaches the client.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Coroutine

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException

from vodcatalog.api import params
from vodcatalog.api.app import ANY_METHOD, get_db_session
from vodcatalog.catalog.pagination import build_pagination, page_offset
from vodcatalog.catalog.tree import build_category_tree
from vodcatalog.db import repo
from vodcatalog.db.repo import DbSession
from vodcatalog.models.domain import CategoryEntity, VideoEntity
from vodcatalog.models.types import (
    ApiResponse,
    CategoryCountRecord,
    CategoryRecord,
    ClassData,
    ErrorResponse,
    SearchData,
    StatsData,
    VideoListData,
    VideoRecord,
)

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=7)
TOP_CATEGORY_COUNT = 10
MIN_QUERY_LENGTH = 2


def error_response(message: str, status_code: int) -> JSONResponse:
    """``{"success": false, "error": message}`` with the given status."""
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)


class ReadApiRoute(APIRoute):
    """Route class converting unexpected handler errors into a generic 500."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_handler = super().get_route_handler()

        async def handler(request: Request) -> Response:
            try:
                return await original_handler(request)
            except (HTTPException, RequestValidationError):
                raise
            except Exception:
                logger.exception(f"API error on {request.url.path}")
                return error_response("Server error", 500)

        return handler


router = APIRouter(route_class=ReadApiRoute)


def _video_record(video: VideoEntity) -> VideoRecord:
    return VideoRecord.model_validate(video, from_attributes=True)


def _category_record(category: CategoryEntity) -> CategoryRecord:
    return CategoryRecord.model_validate(category, from_attributes=True)


@router.api_route("/list", methods=ANY_METHOD, response_model=ApiResponse[VideoListData])
def list_videos(
    page: str | None = None,
    limit: str | None = None,
    type_id: str | None = None,
    session: DbSession = Depends(get_db_session),
) -> ApiResponse[VideoListData]:
    """Get one page of videos with the category list and pagination block.

    Args:
        page: 1-based page (default 1).
        limit: Page size (default 20, at most 100).
        type_id: Optional category filter.
        session: Database session (injected).
    """
    page_no = params.list_page(page)
    page_size = params.list_limit(limit)
    type_filter = type_id or None

    total = repo.count_videos(session, type_filter)
    videos = repo.list_videos(
        session,
        limit=page_size,
        offset=page_offset(page_no, page_size),
        type_id=type_filter,
    )
    categories = repo.list_categories(session)

    return ApiResponse(
        data=VideoListData(
            videos=[_video_record(v) for v in videos],
            categories=[_category_record(c) for c in categories],
            pagination=build_pagination(page_no, page_size, total),
        )
    )


@router.api_route(
    "/detail/{vod_path:path}", methods=ANY_METHOD, response_model=ApiResponse[VideoRecord]
)
def get_video(
    vod_path: str,
    session: DbSession = Depends(get_db_session),
):
    """Get a single video by the last segment of the path.

    Returns:
        The video, or 404 ``Video not found``.
    """
    vod_id = params.parse_vod_id(vod_path.rsplit("/", 1)[-1])
    video = repo.get_video(session, vod_id) if vod_id is not None else None

    if video is None:
        return error_response("Video not found", 404)

    return ApiResponse(data=_video_record(video))


@router.api_route("/search", methods=ANY_METHOD, response_model=ApiResponse[SearchData])
def search_videos(
    q: str | None = None,
    limit: str | None = None,
    session: DbSession = Depends(get_db_session),
) -> ApiResponse[SearchData]:
    """Search video names.

    Queries shorter than two characters return an empty result without a
    database round trip. ``total`` is the number of rows returned, not the
    number of rows that match.
    """
    if not q or len(q) < MIN_QUERY_LENGTH:
        return ApiResponse(data=SearchData(videos=[], total=0, query=q or ""))

    videos = repo.search_videos(session, q, params.search_limit(limit))
    return ApiResponse(
        data=SearchData(
            videos=[_video_record(v) for v in videos],
            total=len(videos),
            query=q,
        )
    )


@router.api_route("/class", methods=ANY_METHOD, response_model=ApiResponse[ClassData])
def list_classes(session: DbSession = Depends(get_db_session)) -> ApiResponse[ClassData]:
    """Get all categories, flat and as a tree."""
    categories = repo.list_categories(session)
    return ApiResponse(
        data=ClassData(
            flat=[_category_record(c) for c in categories],
            tree=build_category_tree(categories),
        )
    )


@router.api_route("/stats", methods=ANY_METHOD, response_model=ApiResponse[StatsData])
def get_stats(session: DbSession = Depends(get_db_session)) -> ApiResponse[StatsData]:
    """Get total and recent video counts plus the ten largest categories.

    The three queries run one after another in the same session, so the
    numbers come from a single snapshot of the catalog.
    """
    now = datetime.now(timezone.utc)

    total = repo.count_videos(session)
    recent = repo.count_videos_since(session, now - RECENT_WINDOW)
    top = repo.top_categories(session, TOP_CATEGORY_COUNT)

    return ApiResponse(
        data=StatsData(
            totalVideos=total,
            recentVideos=recent,
            topCategories=[CategoryCountRecord(type_name=c.type_name, count=c.count) for c in top],
            updatedAt=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        )
    )


def endpoint_not_found():
    """Any other path starting with /api/vod (registered by the app factory)."""
    return error_response("Endpoint not found", 404)
