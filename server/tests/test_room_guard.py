"""
Tests for room access control.
"""

import pytest

from parlor.clock import new_session_id
from parlor.hashing import hash_password
from parlor.rooms import AccessStatus, RoomGuard, RoomStore
from parlor.sessions import SessionStore


@pytest.fixture
def guard(room_store, session_store):
    return RoomGuard(room_store, session_store)


@pytest.fixture
async def sid(session_store):
    session_id = new_session_id()
    await session_store.insert(session_id, 1000)
    return session_id


def test_hash_password_is_hex_sha256():
    assert hash_password("secret") == (
        "2bb80d537b1da3e38bd30361aa855686bde0eacd7162fef6a25fe97bf527a25b"
    )


@pytest.mark.asyncio
async def test_missing_room_is_not_found(guard, sid):
    access = await guard.authorize(sid, "nowhere")

    assert access.status is AccessStatus.NOT_FOUND
    assert access.room is None
    assert not access.granted


@pytest.mark.asyncio
async def test_no_attempt_is_unauthorized(guard, sid, make_room):
    await make_room("lobby", "secret")

    access = await guard.authorize(sid, "lobby")

    assert access.status is AccessStatus.UNAUTHORIZED


@pytest.mark.asyncio
async def test_wrong_attempt_is_unauthorized(guard, sid, make_room):
    await make_room("lobby", "secret")
    await guard.submit_attempt(sid, "lobby", "guess")

    access = await guard.authorize(sid, "lobby")

    assert access.status is AccessStatus.UNAUTHORIZED


@pytest.mark.asyncio
async def test_matching_attempt_is_authorized(guard, sid, make_room):
    room = await make_room("lobby", "secret")
    await guard.submit_attempt(sid, "lobby", "secret")

    access = await guard.authorize(sid, "lobby")

    assert access.granted
    assert access.room.id == room.id


@pytest.mark.asyncio
async def test_resubmitting_replaces_attempt(guard, sid, make_room):
    await make_room("lobby", "secret")
    await guard.submit_attempt(sid, "lobby", "secret")
    await guard.submit_attempt(sid, "lobby", "guess")

    assert (await guard.authorize(sid, "lobby")).status is AccessStatus.UNAUTHORIZED


@pytest.mark.asyncio
async def test_password_change_revokes_access(guard, sid, make_room, room_store):
    await make_room("lobby", "secret")
    await guard.submit_attempt(sid, "lobby", "secret")
    assert (await guard.authorize(sid, "lobby")).granted

    await room_store.change_password("lobby", hash_password("new-secret"))

    assert (await guard.authorize(sid, "lobby")).status is AccessStatus.UNAUTHORIZED

    await guard.submit_attempt(sid, "lobby", "new-secret")
    assert (await guard.authorize(sid, "lobby")).granted


@pytest.mark.asyncio
async def test_password_change_seen_from_another_db_session(guard, sid, make_room, session_factory):
    """A password changed through another connection applies on the next check."""
    await make_room("lobby", "secret")
    await guard.submit_attempt(sid, "lobby", "secret")
    assert (await guard.authorize(sid, "lobby")).granted

    async with session_factory() as other:
        await RoomStore(other).change_password("lobby", hash_password("other"))

    assert not (await guard.authorize(sid, "lobby")).granted


@pytest.mark.asyncio
async def test_attempts_are_per_session(guard, sid, make_room, session_store):
    await make_room("lobby", "secret")
    other = new_session_id()
    await session_store.insert(other, 1000)

    await guard.submit_attempt(sid, "lobby", "secret")

    assert (await guard.authorize(sid, "lobby")).granted
    assert not (await guard.authorize(other, "lobby")).granted


@pytest.mark.asyncio
async def test_check_password(guard, make_room):
    await make_room("lobby", "secret")

    assert await guard.check_password("lobby", "secret") is True
    assert await guard.check_password("lobby", "nope") is False
    assert await guard.check_password("nowhere", "secret") is False


@pytest.mark.asyncio
async def test_deleting_room_drops_attempts(guard, sid, make_room, room_store, session_store):
    await make_room("lobby", "secret")
    await guard.submit_attempt(sid, "lobby", "secret")

    await room_store.delete("lobby")
    await make_room("lobby", "secret")

    assert await session_store.get_room_attempt(sid, "lobby") is None
    assert not (await guard.authorize(sid, "lobby")).granted
