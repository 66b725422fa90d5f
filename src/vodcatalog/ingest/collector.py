"""Ingestion of the upstream listing into the catalog tables.

A run walks pages 1..max_pages inside a single transaction:

- a page that cannot be fetched aborts the run and rolls back every
  page already written by it;
- a single video that fails validation or its write is logged and
  skipped (its SAVEPOINT is rolled back, the run goes on);
- the run stops early when upstream reports no data or its own last page.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, ContextManager

from vodcatalog.db import repo
from vodcatalog.db.repo import DbSession
from vodcatalog.ingest.normalize import category_from_upstream, video_from_upstream
from vodcatalog.models.types import UpstreamCategory, UpstreamPage, UpstreamVideo
from vodcatalog.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], DbSession]
ClientFactory = Callable[[], ContextManager[UpstreamClient]]


class CollectionConfigError(Exception):
    """Raised when ingestion is requested without an upstream URL."""

    pass


@dataclass
class CollectionResult:
    """Outcome of one ingestion run."""

    count: int
    pages_fetched: int


def _record_id(raw: Any) -> Any:
    return raw.get("vod_id") if isinstance(raw, dict) else None


def _save_categories(session: DbSession, page: UpstreamPage) -> None:
    """Upsert the page-1 categories; a malformed entry fails the run."""
    categories = page.categories or []
    logger.info(f"Processing {len(categories)} categories...")
    for category in categories:
        repo.upsert_category(
            session, category_from_upstream(UpstreamCategory.model_validate(category))
        )


def _save_videos(session: DbSession, page: UpstreamPage) -> int:
    """Upsert every video of a page, returning how many were saved."""
    saved = 0
    for raw in page.videos or []:
        try:
            entity = video_from_upstream(UpstreamVideo.model_validate(raw))
            with session.begin_nested():
                repo.upsert_video(session, entity)
        except Exception as e:
            logger.error(f"Error saving video {_record_id(raw)}: {e}")
            continue
        saved += 1
    return saved


def collect(
    session: DbSession,
    client: UpstreamClient,
    max_pages: int = 1,
    *,
    delay_seconds: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> CollectionResult:
    """Run one ingestion pass.

    Args:
        session: Database session; committed on success, rolled back on error.
        client: Open upstream client.
        max_pages: Upper bound on pages to fetch.
        delay_seconds: Pause between consecutive page fetches.
        sleep: Sleep function (tests pass a recorder).

    Returns:
        CollectionResult with the number of videos saved.

    Raises:
        UpstreamError: If a page cannot be fetched; nothing is persisted.
    """
    logger.info(f"Starting data collection (max pages: {max_pages})...")
    total_saved = 0
    pages_fetched = 0

    try:
        page_no = 1
        while page_no <= max_pages:
            logger.info(f"Fetching page {page_no}...")
            page = client.fetch_page(page_no)

            if not page.ok:
                logger.info("No more data available")
                break
            pages_fetched += 1

            if page_no == 1 and page.categories:
                _save_categories(session, page)

            logger.info(f"Processing {len(page.videos or [])} videos from page {page_no}...")
            total_saved += _save_videos(session, page)

            total_pages = page.pagecount or 1
            if page_no >= total_pages:
                logger.info(f"Reached total pages ({total_pages})")
                break

            page_no += 1
            if page_no <= max_pages:
                sleep(delay_seconds)

        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Collection failed: {e}")
        raise

    logger.info(f"Collection completed! Saved {total_saved} videos.")
    return CollectionResult(count=total_saved, pages_fetched=pages_fetched)


def run_collection(
    session_factory: SessionFactory,
    client_factory: ClientFactory,
    max_pages: int = 1,
    *,
    delay_seconds: float = 1.0,
) -> CollectionResult:
    """Open a fresh session and upstream client, then run ``collect``.

    Both resources are closed when the run ends, whatever its outcome.
    """
    with session_factory() as session, client_factory() as client:
        return collect(session, client, max_pages, delay_seconds=delay_seconds)
