"""Tests for upstream record normalization."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from vodcatalog.ingest.normalize import (
    category_from_upstream,
    normalize_vod_time,
    parse_vod_time,
    video_from_upstream,
)
from vodcatalog.models.types import UpstreamCategory, UpstreamVideo

FIXED_NOW = datetime(2030, 1, 2, 3, 4, 5)


class TestNormalizeVodTime:
    """vod_time is stored as 'YYYY-MM-DD HH:MM:SS' (UTC)."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2024-05-01 12:30:45", "2024-05-01 12:30:45"),
            ("2024-05-01T12:30:45", "2024-05-01 12:30:45"),
            ("2024-05-01T12:30:45Z", "2024-05-01 12:30:45"),
            ("2024-05-01T12:30:45.123Z", "2024-05-01 12:30:45"),
            ("2024-05-01T20:30:45+08:00", "2024-05-01 12:30:45"),
            ("2024-05-01", "2024-05-01 00:00:00"),
            ("2024/05/01 12:30:45", "2024-05-01 12:30:45"),
            (" 2024-05-01 12:30:45 ", "2024-05-01 12:30:45"),
        ],
    )
    def test_parses_known_formats(self, raw, expected):
        assert normalize_vod_time(raw, FIXED_NOW) == expected

    @pytest.mark.parametrize("raw", ["yesterday", "2024-13-45 99:99:99", "   "])
    def test_unparseable_uses_now(self, raw):
        assert normalize_vod_time(raw, FIXED_NOW) == "2030-01-02 03:04:05"

    @pytest.mark.parametrize("raw", [None, ""])
    def test_missing_stays_missing(self, raw):
        assert normalize_vod_time(raw, FIXED_NOW) is None

    def test_default_now_is_formatted(self):
        value = normalize_vod_time("garbage")
        assert datetime.strptime(value, "%Y-%m-%d %H:%M:%S")

    def test_parse_returns_naive_utc(self):
        parsed = parse_vod_time("2024-05-01T00:30:00-01:00")
        assert parsed == datetime(2024, 5, 1, 1, 30, 0)
        assert parsed.tzinfo is None


class TestRecordMapping:
    def test_video_defaults(self):
        video = UpstreamVideo.model_validate({"vod_id": "15", "vod_name": "Title"})

        entity = video_from_upstream(video, FIXED_NOW)

        assert entity.vod_id == 15
        assert entity.vod_en == ""
        assert entity.vod_remarks == ""
        assert entity.vod_play_from == ""
        assert entity.vod_time is None

    def test_numeric_name_coerced(self):
        video = UpstreamVideo.model_validate({"vod_id": 1, "vod_name": 1917})

        assert video_from_upstream(video).vod_name == "1917"

    def test_video_requires_name(self):
        with pytest.raises(ValidationError):
            UpstreamVideo.model_validate({"vod_id": 1})

    def test_video_requires_integer_id(self):
        with pytest.raises(ValidationError):
            UpstreamVideo.model_validate({"vod_id": "abc", "vod_name": "x"})

    @pytest.mark.parametrize("pid", [None, 0])
    def test_category_root(self, pid):
        category = UpstreamCategory.model_validate({"type_id": 3, "type_pid": pid, "type_name": "X"})

        assert category_from_upstream(category).type_pid == 0

    def test_category_missing_pid(self):
        category = UpstreamCategory.model_validate({"type_id": 3, "type_name": "X"})

        assert category_from_upstream(category).type_pid == 0
