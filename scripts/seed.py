#!/usr/bin/env python
"""
Seed the database with the permission catalog, system user and demo data.

Restart the API afterwards so it picks up new permissions.
"""

import argparse
import asyncio
import sys

from bookshelf.core.database import async_session_factory
from bookshelf.core.seeding import DEMO_PASSWORD, DEMO_USERS, SCENARIOS


async def main(scenario: str, system_password: str | None) -> None:
    """Run the seeding based on scenario."""
    seeder = SCENARIOS.get(scenario)
    if seeder is None:
        print(f"Unknown scenario: {scenario}")
        print(f"Available scenarios: {', '.join(SCENARIOS)}")
        sys.exit(1)

    async with async_session_factory() as session:
        await seeder(session, system_password)
        await session.commit()

    print(f"Seeded scenario: {scenario}")
    if scenario == "demo":
        for demo in DEMO_USERS:
            print(f"  {demo.email} / {DEMO_PASSWORD} ({demo.role})")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with catalog data")
    parser.add_argument(
        "--scenario",
        "-s",
        default="default",
        help="Seed scenario to run (default, demo)",
    )
    parser.add_argument(
        "--system-password",
        default=None,
        help="Password for the system user (random if omitted)",
    )
    args = parser.parse_args()

    asyncio.run(main(args.scenario, args.system_password))
