#!/usr/bin/env python3
"""
Smoke test against a running Hajari server.

Claims a random device, checks duplicate and invalid claims are handled,
and verifies the claim shows up in the listing.

Usage:
    python scripts/smoke_test.py [--api-url URL]
"""

import argparse
import asyncio
import random
import sys
from datetime import datetime

import httpx


class SmokeTester:
    """Runs claim/list checks and records results."""

    def __init__(self, api_url: str = "http://localhost:3000"):
        self.api_url = api_url.rstrip("/")
        self.test_results = []

    async def run(self) -> None:
        mac = ":".join(f"{random.randint(0, 255):02x}" for _ in range(6))

        async with httpx.AsyncClient(base_url=self.api_url, timeout=10.0) as client:
            print(f"\n[{self._ts()}] Health")
            resp = await client.get("/api/v1/health")
            self._check(resp.status_code == 200, f"health status {resp.json().get('status')}")

            print(f"\n[{self._ts()}] Claiming {mac}")
            resp = await client.post("/claim_device", json={"name": "smoke_test", "mac_address": mac})
            self._check(resp.json().get("status") is True, "first claim accepted")

            resp = await client.post("/claim_device", json={"name": "smoke_test_2", "mac_address": mac})
            self._check(
                resp.json().get("data") == "Device already claimed",
                "duplicate claim rejected",
            )

            resp = await client.post("/claim_device", json={"name": "yo", "mac_address": mac})
            self._check(resp.status_code == 400, f"short name rejected: {resp.json()}")

            print(f"\n[{self._ts()}] Listing claims")
            resp = await client.get("/list_users/")
            entry = resp.json().get("data", {}).get(mac)
            self._check(entry is not None and entry["name"] == "smoke_test", "claim listed with first name")

    def _check(self, ok: bool, message: str) -> None:
        self.test_results.append((ok, message))
        print(f"  {'✓' if ok else '✗'} {message}")

    def print_summary(self) -> bool:
        passed = sum(1 for ok, _ in self.test_results if ok)
        print("\n" + "=" * 60)
        print(f"{passed}/{len(self.test_results)} checks passed")
        print("=" * 60)
        return passed == len(self.test_results)

    @staticmethod
    def _ts():
        return datetime.now().strftime("%H:%M:%S")


async def main():
    parser = argparse.ArgumentParser(description="Hajari smoke test")
    parser.add_argument("--api-url", default="http://localhost:3000", help="API base URL")
    args = parser.parse_args()

    tester = SmokeTester(args.api_url)

    try:
        await tester.run()
    except httpx.HTTPError as e:
        print(f"\n✗ Request failed: {e}")
        sys.exit(1)

    sys.exit(0 if tester.print_summary() else 1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n\nTest interrupted by user")
        sys.exit(130)
