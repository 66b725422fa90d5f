#!/usr/bin/env python3
"""Seed a demo catalog for local development.

Usage:
    VOD_DB_PATH=demo.db python scripts/seed_demo.py

This script:
1. Initializes the database schema
2. Upserts a small category tree (including one orphaned category)
3. Upserts a handful of videos across those categories
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from vodcatalog.config import load_settings  # noqa: E402
from vodcatalog.db import repo  # noqa: E402
from vodcatalog.db.session import get_session_factory, init_db  # noqa: E402
from vodcatalog.models.domain import CategoryEntity, VideoEntity  # noqa: E402

DEMO_CATEGORIES = [
    CategoryEntity(type_id=1, type_pid=0, type_name="Movies"),
    CategoryEntity(type_id=2, type_pid=0, type_name="Series"),
    CategoryEntity(type_id=6, type_pid=1, type_name="Action"),
    CategoryEntity(type_id=7, type_pid=1, type_name="Comedy"),
    CategoryEntity(type_id=13, type_pid=2, type_name="Drama Series"),
    # Parent 99 does not exist: listed in flat, absent from the tree
    CategoryEntity(type_id=40, type_pid=99, type_name="Archive"),
]

DEMO_VIDEOS = [
    VideoEntity(1001, "Night Runner", 6, "Action", "Night Runner", "2024-05-01 20:00:00", "HD", "m3u8"),
    VideoEntity(1002, "Laugh Track", 7, "Comedy", "", "2024-05-03 09:30:00", "Complete", "m3u8"),
    VideoEntity(1003, "Harbor Lights", 13, "Drama Series", "Harbor Lights", "2024-05-04 18:15:00", "EP12", "m3u8"),
    VideoEntity(1004, "Steel Horizon", 6, "Action", "", "2024-04-28 12:00:00", "HD", "mp4"),
    VideoEntity(1005, "Old Reels", 40, "Archive", "", None, "", ""),
]


def main() -> int:
    """Main entry point."""
    settings = load_settings()

    print("=" * 60)
    print("VOD Catalog Demo Seeding Script")
    print("=" * 60)

    print("\n[1/3] Initializing schema...")
    init_db(settings.db_path)

    factory = get_session_factory(settings.db_path)
    with factory() as session:
        print(f"\n[2/3] Seeding {len(DEMO_CATEGORIES)} categories...")
        for category in DEMO_CATEGORIES:
            repo.upsert_category(session, category)

        print(f"\n[3/3] Seeding {len(DEMO_VIDEOS)} videos...")
        for video in DEMO_VIDEOS:
            repo.upsert_video(session, video)

        session.commit()

    print("\n" + "=" * 60)
    print("Demo seeding complete!")
    print(f"Database: {settings.db_path}")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
