from __future__ import annotations
from uuid import UUID
from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession
from practice.models.acl import ACL, Problem

async def authorize(session: AsyncSession, user_id: UUID, problem: Problem) -> ACL:
    """Grant review rights for a problem; existing grants are returned as-is."""
    grant = await session.scalar(
        select(ACL).where(ACL.user_id == user_id, ACL.language == problem.language, ACL.slug == problem.slug)
    )
    if grant:
        return grant
    grant = ACL(user_id=user_id, language=problem.language, slug=problem.slug)
    session.add(grant)
    await session.flush()
    return grant

async def authorized_problems(session: AsyncSession, user_id: UUID) -> list[Problem]:
    rows = (await session.execute(
        select(ACL.language, ACL.slug)
        .where(ACL.user_id == user_id)
        .order_by(ACL.created_at.asc(), ACL.language.asc(), ACL.slug.asc())
    )).all()
    return [Problem(language, slug) for (language, slug) in rows]

async def is_authorized(session: AsyncSession, user_id: UUID, problem: Problem) -> bool:
    return bool(await session.scalar(
        select(exists().where(ACL.user_id == user_id, ACL.language == problem.language, ACL.slug == problem.slug))
    ))
