import uuid
import pytest

from practice.models.acl import Problem
from practice.services.accounts import create_user
from practice.services.acl import authorize, authorized_problems, is_authorized
from practice.services.dailies import dailies
from practice.services.five_a_day import increment_five_a_day
from practice.services.submissions import add_comment, has_comment_from, latest_submissions_for, submit_iteration

BOB = Problem("ruby", "bob")
LEAP = Problem("ruby", "leap")


async def _users(session, *names):
    users = [await create_user(session, username=n) for n in names]
    await session.commit()
    return users


@pytest.mark.asyncio
async def test_authorize_is_idempotent(db_session):
    (fred,) = await _users(db_session, "fred")
    g1 = await authorize(db_session, fred.id, BOB)
    g2 = await authorize(db_session, fred.id, BOB)
    await authorize(db_session, fred.id, LEAP)
    await db_session.commit()

    assert g1.id == g2.id
    assert await authorized_problems(db_session, fred.id) == [BOB, LEAP]
    assert await is_authorized(db_session, fred.id, BOB)
    assert not await is_authorized(db_session, fred.id, Problem("go", "bob"))


@pytest.mark.asyncio
async def test_submit_iteration_supersedes_previous(db_session):
    sarah, fred = await _users(db_session, "sarah", "fred")
    first = await submit_iteration(db_session, sarah.id, BOB, "v1")
    second = await submit_iteration(db_session, sarah.id, BOB, "v2")
    await db_session.commit()

    assert (first.version, first.is_latest) == (1, False)
    assert (second.version, second.is_latest) == (2, True)
    assert [s.id for s in await latest_submissions_for(db_session, BOB, excluding_author=fred.id)] == [second.id]
    assert await latest_submissions_for(db_session, BOB, excluding_author=sarah.id) == []


@pytest.mark.asyncio
async def test_dailies(db_session):
    fred, sarah, jaclyn = await _users(db_session, "fred", "sarah", "jaclyn")
    await authorize(db_session, fred.id, BOB)
    await authorize(db_session, fred.id, LEAP)

    s1 = await submit_iteration(db_session, sarah.id, BOB)
    await add_comment(db_session, s1.id, sarah.id, "I like to comment")
    s2 = await submit_iteration(db_session, jaclyn.id, BOB)
    s3 = await submit_iteration(db_session, jaclyn.id, LEAP)
    await add_comment(db_session, s3.id, fred.id, "nice")
    await submit_iteration(db_session, fred.id, BOB)
    await db_session.commit()

    assert await has_comment_from(db_session, s3.id, fred.id)
    assert not await has_comment_from(db_session, s1.id, fred.id)

    queue = await dailies(db_session, fred.id)
    assert {s.id for s in queue} == {s1.id, s2.id}


@pytest.mark.asyncio
async def test_dailies_only_queue_latest_iteration(db_session):
    fred, sarah = await _users(db_session, "fred", "sarah")
    await authorize(db_session, fred.id, BOB)
    await submit_iteration(db_session, sarah.id, BOB)
    latest = await submit_iteration(db_session, sarah.id, BOB)
    await db_session.commit()

    assert [s.id for s in await dailies(db_session, fred.id)] == [latest.id]


@pytest.mark.asyncio
async def test_dailies_ignore_unauthorized_problems(db_session):
    fred, sarah = await _users(db_session, "fred", "sarah")
    await authorize(db_session, fred.id, BOB)
    await submit_iteration(db_session, sarah.id, LEAP)
    await db_session.commit()

    assert await dailies(db_session, fred.id) == []


@pytest.mark.asyncio
async def test_dailies_will_subtract_five_a_day_count(db_session):
    fred, *others = await _users(db_session, "fred", "billy", "rich", "jaclyn", "maddy", "sarah")
    await authorize(db_session, fred.id, BOB)
    for u in others:
        await submit_iteration(db_session, u.id, BOB)
    await db_session.commit()

    before = await dailies(db_session, fred.id)
    assert len(before) == 5

    await increment_five_a_day(db_session, fred.id)
    after = await dailies(db_session, fred.id)
    assert len(after) == 4
    assert [s.id for s in after] == [s.id for s in before[1:]]


@pytest.mark.asyncio
async def test_dailies_never_go_negative(db_session):
    fred, sarah = await _users(db_session, "fred", "sarah")
    await authorize(db_session, fred.id, BOB)
    await submit_iteration(db_session, sarah.id, BOB)
    await db_session.commit()

    for _ in range(3):
        await increment_five_a_day(db_session, fred.id)
    assert await dailies(db_session, fred.id) == []


@pytest.mark.asyncio
async def test_dailies_for_unknown_user_are_empty(db_session):
    assert await dailies(db_session, uuid.uuid4()) == []
