"""
Tests for civicpulse/pre_start.py
"""

import asyncio

from civicpulse import pre_start


def test_database_reachable(clean_db):
    assert asyncio.run(pre_start.check_database()) is True


def test_retries_until_database_answers(monkeypatch):
    answers = iter([False, False, True])
    calls = []

    async def flaky():
        calls.append(1)
        return next(answers)

    monkeypatch.setattr(pre_start, "check_database", flaky)
    assert asyncio.run(pre_start.wait_for_database(max_retries=5, retry_interval=0)) is True
    assert len(calls) == 3


def test_gives_up_after_max_retries(monkeypatch):
    async def down():
        return False

    monkeypatch.setattr(pre_start, "check_database", down)
    assert asyncio.run(pre_start.wait_for_database(max_retries=2, retry_interval=0)) is False


def test_missing_tables_reports_dropped_schema(clean_db):
    from civicpulse.core.db import async_engine
    from civicpulse.models import Base

    async def drop_votes():
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.tables["issue_votes"].drop)
        return await pre_start.missing_tables()

    assert asyncio.run(drop_votes()) == ["issue_votes"]
