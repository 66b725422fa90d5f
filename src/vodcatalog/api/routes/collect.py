"""Collection trigger endpoints.

GET /admin/collect?api_key=...&pages=N - Run ingestion and wait for it
GET /cron/collect (X-Cron-Auth header) - Start a one-page ingestion in the background

Both handlers ignore the request method.

Overlapping runs are not serialized; the database transaction is the
only isolation between them.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, BackgroundTasks, Depends, Header
from fastapi.responses import JSONResponse

from vodcatalog.api import params
from vodcatalog.api.app import ANY_METHOD, get_client_factory, get_session_factory, get_settings
from vodcatalog.config import Settings
from vodcatalog.ingest.collector import ClientFactory, SessionFactory, run_collection
from vodcatalog.models.types import CollectResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()

SCHEDULED_PAGES = 1


def _secret_matches(given: str | None, expected: str | None) -> bool:
    """Constant-time comparison; an unset secret never matches."""
    if not given or not expected:
        return False
    return secrets.compare_digest(given.encode(), expected.encode())


def _unauthorized() -> JSONResponse:
    return JSONResponse({"error": "Unauthorized"}, status_code=401)


def run_scheduled_collection(
    session_factory: SessionFactory,
    client_factory: ClientFactory,
    delay_seconds: float,
) -> None:
    """Background job body: run one page of ingestion and log the outcome.

    Errors end here; the job has no caller left to report them to.
    """
    logger.info("Cron-triggered collection starting...")
    try:
        result = run_collection(
            session_factory,
            client_factory,
            SCHEDULED_PAGES,
            delay_seconds=delay_seconds,
        )
    except Exception:
        logger.exception("Cron collection failed")
        return
    logger.info(f"Cron collection completed, saved {result.count} videos")


@router.api_route("/admin/collect", methods=ANY_METHOD, response_model=CollectResponse)
def manual_collect(
    api_key: str | None = None,
    pages: str | None = None,
    settings: Settings = Depends(get_settings),
    session_factory: SessionFactory = Depends(get_session_factory),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    """Run ingestion synchronously for ``pages`` pages (default 1).

    Returns:
        Completion message with the number of saved videos, 401 on a bad
        key, or 500 with the failure message.
    """
    if not _secret_matches(api_key, settings.admin_api_key):
        return _unauthorized()

    max_pages = params.collect_pages(pages)

    try:
        result = run_collection(
            session_factory,
            client_factory,
            max_pages,
            delay_seconds=settings.collect_delay_seconds,
        )
    except Exception as e:
        logger.error(f"Manual collection failed: {e}")
        return JSONResponse(
            {"error": "Collection failed", "message": str(e)},
            status_code=500,
        )

    return CollectResponse(
        message=f"Collection completed! Saved {result.count} videos.",
        pagesCollected=max_pages,
    )


@router.api_route("/cron/collect", methods=ANY_METHOD, response_model=MessageResponse)
def scheduled_collect(
    background_tasks: BackgroundTasks,
    x_cron_auth: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
    session_factory: SessionFactory = Depends(get_session_factory),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    """Start a one-page ingestion after the response is sent."""
    if not _secret_matches(x_cron_auth, settings.cron_secret):
        return _unauthorized()

    background_tasks.add_task(
        run_scheduled_collection,
        session_factory,
        client_factory,
        settings.collect_delay_seconds,
    )
    return MessageResponse(message="Cron collection started in background")
