#!/usr/bin/env python3
"""
Create the weather_cache and forecast_cache tables.

Usage:
    python3 scripts/init_cache_tables.py                 # create if missing
    python3 scripts/init_cache_tables.py --drop          # drop + recreate (loses cached rows)
    python3 scripts/init_cache_tables.py --database-url postgresql://...

Reads DATABASE_URL (or .env) when --database-url is not given.
Exits 0 on success, 1 if the store is unreachable.
"""

import argparse
import asyncio
import logging
import sys

from services.weather_data.db import Base, standalone_engine

logger = logging.getLogger("init_cache_tables")


async def init_tables(database_url: str | None, drop: bool) -> None:
    async with standalone_engine(database_url) as engine:
        async with engine.begin() as conn:
            if drop:
                logger.info("Dropping cache tables")
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    logger.info("Cache tables ready: %s", ", ".join(sorted(Base.metadata.tables)))


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        asyncio.run(init_tables(args.database_url, args.drop))
    except Exception as e:
        logger.error("Failed to initialise cache tables: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
