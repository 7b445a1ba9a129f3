#!/usr/bin/env python3
"""Smoke test a running rank relay.

Checks the health endpoint, then optionally sends one rank change.

Usage:
    python scripts/promote_smoke.py                      # health only
    python scripts/promote_smoke.py 111 222 333          # groupId userId roleId
    RELAY_URL=https://relay.example.com python scripts/promote_smoke.py 111 222 333
"""

import asyncio
import json
import os
import sys

import httpx

RELAY_URL = os.getenv("RELAY_URL", "http://localhost:3000")


async def smoke(ids: list[int]) -> int:
    """Run the smoke checks. Returns a process exit code."""
    print("=" * 60)
    print(f"Rank relay smoke test against {RELAY_URL}")
    print("=" * 60)

    # Upstream attempts can take up to 12s each
    async with httpx.AsyncClient(base_url=RELAY_URL, timeout=60.0) as client:
        print("\n1. Health check...")
        response = await client.get("/api/health")
        print(f"   - HTTP {response.status_code}: {response.text}")
        if response.status_code != 200:
            return 1
        if not response.json().get("env"):
            print("   - OPEN_CLOUD_KEY is not configured on the relay")

        if not ids:
            print("\nNo ids given, skipping promote.")
            return 0

        group_id, user_id, role_id = ids
        print(f"\n2. Promote user {user_id} in group {group_id} to role {role_id}...")
        response = await client.post(
            "/api/promote",
            json={"groupId": group_id, "userId": user_id, "roleId": role_id},
        )
        data = response.json()
        print(f"   - HTTP {response.status_code}")
        print(json.dumps(data, indent=2))

        if data.get("ok"):
            print(f"\nPromoted via {data['where']} (upstream status {data['status']})")
            return 0

        print(f"\nFailed: {data.get('code')}")
        for attempt in data.get("attempts", []):
            print(f"   [{attempt['label']}] {attempt['httpStatus']} {attempt['statusText']}")
        return 1


def main() -> int:
    args = sys.argv[1:]
    if args and len(args) != 3:
        print(__doc__)
        return 2
    try:
        ids = [int(a) for a in args]
    except ValueError:
        print("groupId, userId and roleId must be integers")
        return 2
    return asyncio.run(smoke(ids))


if __name__ == "__main__":
    sys.exit(main())
