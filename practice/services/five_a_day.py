from __future__ import annotations
from uuid import UUID
import structlog
from sqlalchemy import select, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from practice.models.five_a_day import FiveADayCount

log = structlog.get_logger()

DAILY_LIMIT = 5

def _insert_for(session: AsyncSession):
    if session.get_bind().dialect.name == "sqlite":
        return sqlite.insert
    return postgresql.insert

async def increment_five_a_day(session: AsyncSession, user_id: UUID) -> int:
    """Add one review to the user's counter, creating the row on first use. Commits."""
    insert = _insert_for(session)
    stmt = insert(FiveADayCount).values(user_id=user_id, total=1)
    stmt = stmt.on_conflict_do_update(
        index_elements=[FiveADayCount.user_id],
        set_={"total": FiveADayCount.total + 1, "updated_at": func.now()},
    ).returning(FiveADayCount.total)
    total = int((await session.execute(stmt)).scalar_one())
    await session.commit()
    log.info("five_a_day.incremented", user_id=str(user_id), total=total)
    return total

async def daily_count(session: AsyncSession, user_id: UUID) -> int:
    total = await session.scalar(select(FiveADayCount.total).where(FiveADayCount.user_id == user_id))
    return int(total or 0)

async def dailies_available(session: AsyncSession, user_id: UUID) -> bool:
    return await daily_count(session, user_id) < DAILY_LIMIT
