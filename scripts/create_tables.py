#!/usr/bin/env python
"""
Create the CivicPulse database tables.
"""

# Standard library imports
import asyncio
import sys

# Third-party imports
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

# Local application imports
from civicpulse.core.db import async_engine
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.main import create_tables

logger = get_logger("scripts.create_tables")


async def main() -> None:
    logger.info("Creating database tables...")
    try:
        await create_tables()
        async with async_engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    except SQLAlchemyError as e:
        logger.error(f"Error creating tables: {e}")
        sys.exit(1)

    logger.info(f"Tables ready: {', '.join(sorted(tables))}")


if __name__ == "__main__":
    asyncio.run(main())
