from __future__ import annotations
from typing import Iterable
from uuid import UUID
from sqlalchemy import select, func, exists
from sqlalchemy.ext.asyncio import AsyncSession
from practice.models.acl import Problem
from practice.models.submission import Submission, Comment

async def submit_iteration(session: AsyncSession, user_id: UUID, problem: Problem, code: str | None = None) -> Submission:
    """Record a new iteration and supersede the author's previous one for the same problem."""
    previous = (await session.execute(
        select(Submission).where(
            Submission.user_id == user_id,
            Submission.language == problem.language,
            Submission.slug == problem.slug,
            Submission.is_latest.is_(True),
        )
    )).scalars().all()
    for s in previous:
        s.is_latest = False

    last_version = await session.scalar(
        select(func.coalesce(func.max(Submission.version), 0)).where(
            Submission.user_id == user_id,
            Submission.language == problem.language,
            Submission.slug == problem.slug,
        )
    )
    s = Submission(
        user_id=user_id,
        language=problem.language,
        slug=problem.slug,
        version=int(last_version or 0) + 1,
        is_latest=True,
        code=code,
    )
    session.add(s)
    await session.flush()
    await session.refresh(s)
    return s

async def latest_submissions_for(session: AsyncSession, problem: Problem, excluding_author: UUID) -> list[Submission]:
    return list((await session.execute(
        select(Submission)
        .where(Submission.language == problem.language, Submission.slug == problem.slug)
        .where(Submission.is_latest.is_(True))
        .where(Submission.user_id != excluding_author)
        .order_by(Submission.created_at.asc(), Submission.id.asc())
    )).scalars().all())

async def has_comment_from(session: AsyncSession, submission_id: UUID, user_id: UUID) -> bool:
    return bool(await session.scalar(
        select(exists().where(Comment.submission_id == submission_id, Comment.user_id == user_id))
    ))

async def reviewed_submission_ids(session: AsyncSession, user_id: UUID, submission_ids: Iterable[UUID]) -> set[UUID]:
    ids = list(submission_ids)
    if not ids:
        return set()
    rows = await session.scalars(
        select(Comment.submission_id).where(Comment.user_id == user_id, Comment.submission_id.in_(ids)).distinct()
    )
    return set(rows.all())

async def add_comment(session: AsyncSession, submission_id: UUID, user_id: UUID, body: str) -> Comment:
    c = Comment(submission_id=submission_id, user_id=user_id, body=body)
    session.add(c)
    await session.flush()
    await session.refresh(c)
    return c

def for_review(submission_id: UUID):
    # row lock held until commit; concurrent reviews of one submission serialize
    return (
        select(Submission)
        .where(Submission.id == submission_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )

async def get_for_review(session: AsyncSession, submission_id: UUID) -> Submission | None:
    return await session.scalar(for_review(submission_id))
