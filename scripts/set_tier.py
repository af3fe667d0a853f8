#!/usr/bin/env python3
"""
CLI utility to set a caller's subscription tier.

Tiers are changed by operators, never by the caller through the API.

Usage:
    uv run scripts/set_tier.py --caller-id uid-123 --tier premium
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.quota.factory import get_resolver
from app.quota.services.profile_store import PostgresProfileStore
from quota_core.domain.quota import Tier


async def run(caller_id: str, tier: str) -> dict:
    stored = await PostgresProfileStore().write_tier(caller_id, tier)
    snapshot = await get_resolver().snapshot(caller_id)
    return {
        "caller_id": caller_id,
        "tier": stored.value,
        "ceiling_bytes": snapshot.ceiling_bytes,
        "usage_bytes": snapshot.usage_bytes,
        "storage_left_in_bytes": snapshot.storage_left_in_bytes,
    }


def main():
    parser = argparse.ArgumentParser(description="Set a caller's subscription tier")
    parser.add_argument("--caller-id", required=True, help="Verified caller id")
    parser.add_argument("--tier", required=True, choices=[tier.value for tier in Tier])
    args = parser.parse_args()

    result = asyncio.run(run(args.caller_id, args.tier))
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
