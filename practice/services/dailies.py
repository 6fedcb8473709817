from __future__ import annotations
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from practice.models.submission import Submission
from practice.services.acl import authorized_problems
from practice.services.submissions import latest_submissions_for, reviewed_submission_ids
from practice.services.five_a_day import daily_count

async def dailies(session: AsyncSession, user_id: UUID) -> list[Submission]:
    """
    Submissions still owed a review by this user today.

    Candidates are other authors' latest iterations on every problem the user
    may review, minus those the user already commented on, in grant order.
    The first `daily_count` candidates are treated as already consumed.
    """
    candidates: list[Submission] = []
    for problem in await authorized_problems(session, user_id):
        subs = await latest_submissions_for(session, problem, excluding_author=user_id)
        reviewed = await reviewed_submission_ids(session, user_id, (s.id for s in subs))
        candidates.extend(s for s in subs if s.id not in reviewed)

    consumed = await daily_count(session, user_id)
    return candidates[consumed:]
