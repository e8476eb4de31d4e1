"""
Reshape legacy restaurant columns into their normalized form.

- neighborhood free text  -> restaurant_neighborhoods links
- happy_hour text / times -> happy_hour_data schedules

Safe to re-run: restaurants already migrated are skipped.

Usage:
    python scripts/migrate_legacy_fields.py [--neighborhoods] [--happy-hours]
"""
import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from places.database import engine, Base, AsyncSessionLocal, database_url
from places.models import *  # noqa: F401,F403 - Import all models to register them
from places.services.legacy_migration import migrate_neighborhoods, migrate_happy_hours

STEPS = {
    "neighborhoods": migrate_neighborhoods,
    "happy_hours": migrate_happy_hours,
}


async def run(selected):
    print(f"Migrating legacy fields in {database_url}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    for name in selected:
        async with AsyncSessionLocal() as session:
            summary = await STEPS[name](session)
        print(
            f"  {name:<14} processed={summary.processed} "
            f"migrated={summary.migrated} skipped={summary.skipped}"
        )

    await engine.dispose()
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--neighborhoods", action="store_true", help="only migrate neighborhoods")
    parser.add_argument("--happy-hours", action="store_true", help="only migrate happy hours")
    args = parser.parse_args()

    selected = [
        name for name, flag in (("neighborhoods", args.neighborhoods), ("happy_hours", args.happy_hours))
        if flag
    ] or list(STEPS)
    asyncio.run(run(selected))


if __name__ == "__main__":
    main()
