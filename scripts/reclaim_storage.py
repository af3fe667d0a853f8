#!/usr/bin/env python3
"""
CLI utility to delete every object a caller owns.

Runs the deletion once. On a partial failure the failed keys are printed
and the exit status is 1; run the command again to delete what is left.

Usage:
    uv run scripts/reclaim_storage.py --caller-id uid-123
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.quota.factory import get_deletion_coordinator
from quota_core.domain.storage import PartiallyFailed


def main():
    parser = argparse.ArgumentParser(description="Delete all objects owned by a caller")
    parser.add_argument("--caller-id", required=True, help="Verified caller id")
    args = parser.parse_args()

    result = asyncio.run(get_deletion_coordinator().delete_all(args.caller_id))
    summary = {
        "caller_id": args.caller_id,
        "succeeded": result.succeeded,
        "deleted": len(result.deleted_keys),
        "failed_keys": list(result.failed_keys) if isinstance(result, PartiallyFailed) else [],
    }
    print(json.dumps(summary, indent=2))

    if not result.succeeded:
        sys.exit(1)


if __name__ == "__main__":
    main()
