from __future__ import annotations
from typing import Iterable
from uuid import UUID
import structlog
from sqlalchemy import select, delete, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from practice.models.user import User
from practice.models.acl import ACL
from practice.models.submission import Submission, Comment
from practice.models.five_a_day import FiveADayCount
from practice.models.team import Team, TeamMembership

log = structlog.get_logger()

RECONCILE_ATTEMPTS = 2


class ReconciliationConflict(Exception):
    pass


def normalize_avatar_url(url: str) -> str:
    return url.split("?", 1)[0]

# ---------- store: lookups ----------

async def find_by_external_id(session: AsyncSession, external_id: str) -> User | None:
    return await session.scalar(select(User).where(User.external_id == external_id))

async def find_by_username(session: AsyncSession, username: str | None) -> User | None:
    if not username:
        return None
    return await session.scalar(select(User).where(func.lower(User.username) == username.lower()))

async def find_in_usernames(session: AsyncSession, usernames: Iterable[str]) -> list[User]:
    lowered = {u.lower() for u in usernames if u}
    if not lowered:
        return []
    return list((await session.execute(
        select(User).where(func.lower(User.username).in_(lowered)).order_by(User.username.asc())
    )).scalars().all())

async def find_or_create_in_usernames(session: AsyncSession, usernames: Iterable[str]) -> list[User]:
    """Return users for every name, creating the missing ones with the casing given."""
    names = [u for u in usernames if u]
    users = await find_in_usernames(session, names)
    known = {u.username.lower() for u in users}
    for name in names:
        if name.lower() in known:
            continue
        users.append(await create_user(session, username=name))
        known.add(name.lower())
    return users

# ---------- store: writes ----------

async def create_user(
    session: AsyncSession,
    *,
    username: str | None = None,
    email: str | None = None,
    external_id: str | None = None,
    avatar_url: str | None = None,
) -> User:
    user = User(username=username, email=email, external_id=external_id, avatar_url=avatar_url)
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


async def delete_user(session: AsyncSession, user_id: UUID) -> None:
    """
    Remove an account and every record that references it, in one commit:
    memberships (as member or inviter), teams it created, its comments,
    its submissions and the comments on them, its grants and its counter.
    """
    owned_teams = select(Team.id).where(Team.creator_id == user_id)
    own_submissions = select(Submission.id).where(Submission.user_id == user_id)

    await session.execute(delete(TeamMembership).where(or_(
        TeamMembership.user_id == user_id,
        TeamMembership.inviter_id == user_id,
        TeamMembership.team_id.in_(owned_teams),
    )))
    await session.execute(delete(Team).where(Team.creator_id == user_id))
    await session.execute(delete(Comment).where(or_(
        Comment.user_id == user_id,
        Comment.submission_id.in_(own_submissions),
    )))
    await session.execute(delete(Submission).where(Submission.user_id == user_id))
    await session.execute(delete(ACL).where(ACL.user_id == user_id))
    await session.execute(delete(FiveADayCount).where(FiveADayCount.user_id == user_id))
    result = await session.execute(delete(User).where(User.id == user_id))
    await session.commit()
    if result.rowcount:
        log.info("account.deleted", user_id=str(user_id))

# ---------- reconciliation ----------

async def _claim_username(session: AsyncSession, target: User, username: str) -> None:
    if not username:
        target.username = username
        return
    victims = (await session.execute(
        select(User).where(func.lower(User.username) == username.lower(), User.id != target.id)
    )).scalars().all()
    for v in victims:
        log.info("account.username_released", user_id=str(v.id), username=v.username, claimed_by=str(target.id))
        v.username = ""
    if victims:
        # release must reach the index before the target takes the name
        await session.flush()
    target.username = username


async def _merge(
    session: AsyncSession,
    external_id: str,
    username: str | None,
    email: str | None,
    avatar_url: str | None,
) -> User:
    target = await find_by_external_id(session, external_id)
    if target is None and username:
        target = await session.scalar(
            select(User).where(func.lower(User.username) == username.lower(), User.external_id.is_(None))
        )
        if target is not None:
            target.external_id = external_id
            log.info("account.invitation_claimed", user_id=str(target.id), external_id=external_id)
    if target is None:
        target = await create_user(session, external_id=external_id)
        log.info("account.created", user_id=str(target.id), external_id=external_id)

    if username is not None:
        await _claim_username(session, target, username)
    if email and not target.email:
        target.email = email
    if avatar_url is not None:
        target.avatar_url = normalize_avatar_url(avatar_url)
    await session.flush()
    return target


async def reconcile_external_login(
    session: AsyncSession,
    external_id: str,
    username: str | None = None,
    email: str | None = None,
    avatar_url: str | None = None,
) -> User:
    """
    Find or create the account behind an external login and merge the
    asserted profile into it.

    Lookup order: linked external id, then an unlinked (invited) account
    with the same username, then a new account. The username moves to the
    target even if another account holds it; email is only filled when
    empty; avatar is always replaced. Everything commits together, and a
    uniqueness violation from a concurrent login is retried once.
    """
    for attempt in range(1, RECONCILE_ATTEMPTS + 1):
        try:
            user = await _merge(session, external_id, username, email, avatar_url)
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            if attempt == RECONCILE_ATTEMPTS:
                raise ReconciliationConflict(f"could not reconcile external id {external_id}") from e
            log.warning("account.reconcile_retry", external_id=external_id, attempt=attempt)
            continue
        except Exception:
            await session.rollback()
            raise
        await session.refresh(user)
        return user
    raise ReconciliationConflict(f"could not reconcile external id {external_id}")
