from __future__ import annotations
from typing import Iterable
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from practice.models.team import Team, TeamMembership
from practice.services.accounts import find_or_create_in_usernames

async def define_team(
    session: AsyncSession,
    creator_id: UUID,
    slug: str,
    usernames: Iterable[str],
    name: str | None = None,
) -> Team:
    """Create a team and an unconfirmed invitation for each named user."""
    team = Team(slug=slug, name=name or slug, creator_id=creator_id)
    session.add(team)
    await session.flush()
    for member in await find_or_create_in_usernames(session, usernames):
        if member.id == creator_id:
            continue
        session.add(TeamMembership(team_id=team.id, user_id=member.id, inviter_id=creator_id, confirmed=False))
    await session.flush()
    return team

async def confirm_membership(session: AsyncSession, membership_id: UUID) -> TeamMembership | None:
    m = await session.get(TeamMembership, membership_id)
    if m is None:
        return None
    m.confirmed = True
    await session.flush()
    return m
