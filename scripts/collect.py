#!/usr/bin/env python3
"""Run one ingestion pass from the command line.

For hosts that schedule collection with system cron instead of calling
the /cron/collect endpoint. Reads the same environment variables as the
service (VOD_DB_PATH, SOURCE_API_URL, COLLECT_DELAY_SECONDS, ...).

Usage:
    python scripts/collect.py [pages]

Exit codes:
    0: Collection committed
    1: Collection failed (nothing was written)
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from vodcatalog.api.params import collect_pages  # noqa: E402
from vodcatalog.config import configure_logging, load_settings  # noqa: E402
from vodcatalog.db.session import get_session_factory, init_db  # noqa: E402
from vodcatalog.ingest.collector import run_collection  # noqa: E402
from vodcatalog.upstream.client import UpstreamClient  # noqa: E402


def main(argv: list[str]) -> int:
    """Main entry point."""
    settings = load_settings()
    configure_logging(settings.log_level)

    if not settings.source_api_url:
        print("FAIL: SOURCE_API_URL is not configured")
        return 1

    pages = collect_pages(argv[1] if len(argv) > 1 else None)
    init_db(settings.db_path)

    print(f"Collecting {pages} page(s) from {settings.source_api_url}")
    print(f"Database: {settings.db_path}")

    try:
        result = run_collection(
            get_session_factory(settings.db_path),
            lambda: UpstreamClient(
                settings.source_api_url,
                timeout=settings.upstream_timeout_seconds,
            ),
            pages,
            delay_seconds=settings.collect_delay_seconds,
        )
    except Exception as e:
        print(f"FAIL: {e}")
        return 1

    print(f"OK: saved {result.count} videos from {result.pages_fetched} page(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
