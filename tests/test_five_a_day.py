import pytest
from sqlalchemy import select, func

from practice.models.five_a_day import FiveADayCount
from practice.services.accounts import create_user
from practice.services.five_a_day import (
    DAILY_LIMIT,
    dailies_available,
    daily_count,
    increment_five_a_day,
)


@pytest.mark.asyncio
async def test_increment_adds_to_table(db_session):
    fred = await create_user(db_session, username="fred")
    await db_session.commit()

    assert await increment_five_a_day(db_session, fred.id) == 1
    count = await db_session.scalar(select(FiveADayCount).where(FiveADayCount.user_id == fred.id))
    assert count.total == 1


@pytest.mark.asyncio
async def test_increment_updates_single_record_per_user(db_session):
    fred = await create_user(db_session, username="fred")
    await db_session.commit()

    for _ in range(5):
        await increment_five_a_day(db_session, fred.id)

    total = await db_session.scalar(select(FiveADayCount.total).where(FiveADayCount.user_id == fred.id))
    assert total == 5
    assert await db_session.scalar(select(func.count()).select_from(FiveADayCount)) == 1


@pytest.mark.asyncio
async def test_counters_are_per_user(db_session):
    fred = await create_user(db_session, username="fred")
    sarah = await create_user(db_session, username="sarah")
    await db_session.commit()

    await increment_five_a_day(db_session, fred.id)
    await increment_five_a_day(db_session, fred.id)
    await increment_five_a_day(db_session, sarah.id)

    assert await daily_count(db_session, fred.id) == 2
    assert await daily_count(db_session, sarah.id) == 1


@pytest.mark.asyncio
async def test_user_daily_count(db_session):
    fred = await create_user(db_session, username="fred")
    await db_session.commit()

    await increment_five_a_day(db_session, fred.id)
    assert await daily_count(db_session, fred.id) == 1


@pytest.mark.asyncio
async def test_user_daily_count_returns_0_if_no_daily(db_session):
    fred = await create_user(db_session, username="fred")
    await db_session.commit()

    assert await daily_count(db_session, fred.id) == 0


@pytest.mark.asyncio
async def test_dailies_available_when_less_than_5(db_session):
    fred = await create_user(db_session, username="fred")
    await db_session.commit()

    assert await dailies_available(db_session, fred.id) is True
    await increment_five_a_day(db_session, fred.id)
    assert await dailies_available(db_session, fred.id) is True


@pytest.mark.asyncio
async def test_dailies_available_when_5(db_session):
    fred = await create_user(db_session, username="fred")
    await db_session.commit()

    for _ in range(DAILY_LIMIT):
        await increment_five_a_day(db_session, fred.id)
    assert await dailies_available(db_session, fred.id) is False
