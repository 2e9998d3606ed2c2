"""
Pre-start checks: wait for the database, then make sure the CivicPulse tables
exist before the API starts serving.
"""

# Standard library imports
import asyncio
from collections.abc import Awaitable, Callable
import sys

# Third-party imports
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

# Local application imports
from civicpulse.core.db import async_engine, run_with_new_session
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.models import Base

logger = get_logger(__name__)


async def _ping(db) -> None:
    await db.execute(text("SELECT 1"))


async def check_database() -> bool:
    try:
        await run_with_new_session(_ping)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {e}")
        return False
    logger.info("Database is ready")
    return True


async def missing_tables() -> list[str]:
    """Tables declared on the models that the database does not have yet."""
    async with async_engine.connect() as conn:
        existing = set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))
    return sorted(set(Base.metadata.tables) - existing)


async def wait_for(check: Callable[[], Awaitable[bool]], what: str, max_retries: int, retry_interval: float) -> bool:
    """Run ``check`` until it passes or ``max_retries`` attempts have failed."""
    for attempt in range(1, max_retries + 1):
        logger.info(f"{what} check, attempt {attempt}/{max_retries}")
        if await check():
            return True
        if attempt < max_retries:
            await asyncio.sleep(retry_interval)

    logger.error(f"{what} not available after {max_retries} attempts")
    return False


async def wait_for_database(max_retries: int = 30, retry_interval: float = 2) -> bool:
    return await wait_for(lambda: check_database(), "Database", max_retries, retry_interval)


async def main() -> None:
    logger.info("Starting pre-start checks...")

    if not await wait_for_database():
        logger.error("Pre-start checks failed: Database is not available")
        sys.exit(1)

    missing = await missing_tables()
    if missing:
        # Local application imports
        from civicpulse.main import create_tables

        logger.info(f"Creating missing tables: {', '.join(missing)}")
        await create_tables()

    logger.info("All pre-start checks passed")


if __name__ == "__main__":
    asyncio.run(main())
