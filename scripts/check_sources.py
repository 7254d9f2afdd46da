#!/usr/bin/env python3
"""Source reachability check.

Probes the manifest endpoint of every registered source, for all users or a
single one, using the configured storage backend.

Usage:
    # All users
    python scripts/check_sources.py

    # One user
    python scripts/check_sources.py --user default

    # JSON output
    python scripts/check_sources.py --json

    # Non-zero exit code when any source is unreachable (CI/CD, probes)
    python scripts/check_sources.py --strict
"""

import argparse
import asyncio
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

# Make the project root importable when run as a plain script
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aiocatalogs.core.config import settings  # noqa: E402
from aiocatalogs.core.infrastructure.http import JsonHttpClient  # noqa: E402
from aiocatalogs.modules.catalogs.domain.repository import SourceStore  # noqa: E402
from aiocatalogs.modules.catalogs.infrastructure.manifest_fetcher import (  # noqa: E402
    ManifestFetcher,
)
from aiocatalogs.modules.catalogs.infrastructure.stores import (  # noqa: E402
    create_source_store,
)


async def check_user(
    store: SourceStore, fetcher: ManifestFetcher, user_id: str
) -> dict:
    """Check every source of one user."""
    sources = await store.load_sources(user_id)
    reachable = await asyncio.gather(
        *(fetcher.check_health(source) for source in sources)
    )
    return {
        source.id: {
            "status": "healthy" if ok else "unhealthy",
            "endpoint": source.endpoint,
        }
        for source, ok in zip(sources, reachable, strict=True)
    }


async def run_check(user_id: str | None = None) -> dict:
    store = create_source_store(settings)
    fetcher = ManifestFetcher(
        JsonHttpClient(
            timeout_sec=settings.FETCH_TIMEOUT_SEC,
            user_agent=settings.FETCHER_USER_AGENT,
        )
    )

    results = {
        "timestamp": datetime.now(UTC).isoformat(),
        "backend": store.backend_name,
        "overall_status": "healthy",
        "users": {},
    }

    storage_error = await store.check_health()
    if storage_error:
        results["overall_status"] = "unhealthy"
        results["error"] = storage_error
        return results

    user_ids = [user_id] if user_id else await store.list_users()
    for uid in user_ids:
        results["users"][uid] = await check_user(store, fetcher, uid)

    statuses = [
        info["status"]
        for sources in results["users"].values()
        for info in sources.values()
    ]
    if any(s != "healthy" for s in statuses):
        results["overall_status"] = "degraded"

    return results


def print_result(result: dict, json_output: bool = False):
    if json_output:
        print(json.dumps(result, indent=2))
        return

    print(f"\n{'=' * 60}")
    print(f"Source Check Report - {result['timestamp']}")
    print(f"Storage backend: {result['backend']}")
    print(f"{'=' * 60}")
    print(f"\nOverall Status: {result['overall_status'].upper()}")

    if "error" in result:
        print(f"    error: {result['error']}")

    for user_id, sources in result["users"].items():
        print(f"\n{'-' * 40}")
        print(f"User {user_id}: {len(sources)} sources")
        for source_id, info in sources.items():
            mark = "OK " if info["status"] == "healthy" else "ERR"
            print(f"  [{mark}] {source_id} ({info['endpoint']})")

    print(f"\n{'=' * 60}\n")


def main():
    parser = argparse.ArgumentParser(description="Check registered catalog sources")
    parser.add_argument(
        "--user",
        "-u",
        type=str,
        help="Only check the sources of this user",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON output",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero unless every source is healthy",
    )

    args = parser.parse_args()

    result = asyncio.run(run_check(args.user))
    print_result(result, args.json)

    if args.strict and result["overall_status"] != "healthy":
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
