"""Shared pytest fixtures for vodcatalog tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vodcatalog.db.schema import Base
from vodcatalog.db.session import create_sqlite_engine
from vodcatalog.upstream.client import UpstreamClient

UPSTREAM_URL = "http://upstream.test/api.php/provide/vod/"


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine shared by every session of a test."""
    engine = create_sqlite_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test engine."""
    return sessionmaker(bind=engine)


@pytest.fixture
def session(session_factory):
    """Create a database session for testing."""
    session = session_factory()
    yield session
    session.close()


def video_payload(vod_id: int, **overrides: Any) -> dict[str, Any]:
    """Upstream video record with sensible defaults."""
    record = {
        "vod_id": vod_id,
        "vod_name": f"Video {vod_id}",
        "type_id": 6,
        "type_name": "Action",
        "vod_en": f"video-{vod_id}",
        "vod_time": "2024-05-01 12:00:00",
        "vod_remarks": "HD",
        "vod_play_from": "m3u8",
    }
    record.update(overrides)
    return record


def page_payload(
    videos: list[Any],
    *,
    pagecount: int = 1,
    code: int = 1,
    categories: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Upstream listing page."""
    payload: dict[str, Any] = {"code": code, "pagecount": pagecount, "list": videos}
    if categories is not None:
        payload["class"] = categories
    return payload


class FakeUpstream:
    """Serves listing pages over an httpx.MockTransport.

    ``pages`` maps page number to either a JSON payload or an
    ``httpx.Response`` (for error statuses). Missing pages answer with an
    empty listing.
    """

    def __init__(self, pages: dict[int, Any]):
        self.pages = pages
        self.requested: list[int] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["pg"])
        assert request.url.params["ac"] == "list"
        self.requested.append(page)
        answer = self.pages.get(page, page_payload([]))
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, content=json.dumps(answer))

    def client(self) -> UpstreamClient:
        return UpstreamClient(UPSTREAM_URL, transport=self.transport)

    @property
    def client_factory(self) -> Callable[[], UpstreamClient]:
        return self.client


ADMIN_KEY = "test-admin-key"
CRON_SECRET = "test-cron-secret"


def create_test_client(session_factory, upstream: FakeUpstream | None = None, **settings_kwargs):
    """Create app bound to the test database (and fake upstream) and return a client."""
    from fastapi.testclient import TestClient

    from vodcatalog.api.app import create_app, get_client_factory, get_session_factory
    from vodcatalog.config import Settings

    settings_kwargs.setdefault("admin_api_key", ADMIN_KEY)
    settings_kwargs.setdefault("cron_secret", CRON_SECRET)
    settings_kwargs.setdefault("collect_delay_seconds", 0.0)
    app = create_app(Settings(**settings_kwargs))

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    if upstream is not None:
        app.dependency_overrides[get_client_factory] = lambda: upstream.client_factory

    return TestClient(app)
