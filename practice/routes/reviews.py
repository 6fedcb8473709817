from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from practice.db import get_session
from practice.auth_deps import get_current_user
from practice.models.acl import Problem
from practice.models.submission import Submission
from practice.schemas.submission import SubmissionPublic, CommentCreate, CommentPublic, DailyCount
from practice.services.acl import is_authorized
from practice.services.dailies import dailies
from practice.services.five_a_day import daily_count, dailies_available, increment_five_a_day
from practice.services.submissions import add_comment, get_for_review, has_comment_from

router = APIRouter(prefix="/dailies", tags=["dailies"])

def _pub(s: Submission) -> SubmissionPublic:
    return SubmissionPublic(
        id=s.id,
        user_id=s.user_id,
        language=s.language,
        slug=s.slug,
        version=s.version,
        created_at=s.created_at,
    )

@router.get("", response_model=list[SubmissionPublic])
async def list_dailies(session: AsyncSession = Depends(get_session), user=Depends(get_current_user)):
    return [_pub(s) for s in await dailies(session, user.id)]

@router.get("/count", response_model=DailyCount)
async def count(session: AsyncSession = Depends(get_session), user=Depends(get_current_user)):
    return DailyCount(
        total=await daily_count(session, user.id),
        available=await dailies_available(session, user.id),
    )

@router.post("/{submission_id}/comments", status_code=201, response_model=CommentPublic)
async def comment(
    submission_id: UUID,
    payload: CommentCreate,
    session: AsyncSession = Depends(get_session),
    user=Depends(get_current_user),
):
    s = await get_for_review(session, submission_id)
    if not s:
        raise HTTPException(status_code=404, detail="Submission not found")

    # only a first review of someone else's current iteration counts towards the quota
    counts = (
        s.is_latest
        and s.user_id != user.id
        and await is_authorized(session, user.id, Problem(s.language, s.slug))
        and not await has_comment_from(session, s.id, user.id)
    )

    c = await add_comment(session, s.id, user.id, payload.body)
    if counts:
        await increment_five_a_day(session, user.id)  # commits the comment too
    else:
        await session.commit()
    await session.refresh(c)
    return CommentPublic(
        id=c.id,
        submission_id=c.submission_id,
        user_id=c.user_id,
        body=c.body,
        created_at=c.created_at,
        counted=bool(counts),
    )
