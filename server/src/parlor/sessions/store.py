"""Data access for sessions, room attempts and room checkpoints."""

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from parlor.db import RoomAttempt, RoomUpdate, Session, upsert


class SessionStore:
    """
    Thin wrapper around the sessions table and its dependent tables.

    Every write is its own statement and is committed immediately; there is
    no row locking. Concurrent writers follow last-write-wins, except for
    checkpoints, which never move backwards.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def rollback(self, *keep) -> None:
        """Roll back the transaction. Objects in keep stay readable afterwards."""
        for obj in keep:
            if obj in self.db:
                self.db.expunge(obj)
        await self.db.rollback()

    # --- Sessions ---

    async def get(self, session_id: str) -> Session | None:
        result = await self.db.execute(
            select(Session)
            .where(Session.id == session_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def insert(self, session_id: str, last_activity: int) -> Session:
        """Insert a new non-admin session. The primary key rejects duplicates."""
        session = Session(id=session_id, last_activity=last_activity, is_admin=False)
        self.db.add(session)
        await self.db.commit()
        return session

    async def touch(self, session_id: str, last_activity: int) -> bool:
        """Set a session's last activity. Returns False if the session is gone."""
        result = await self.db.execute(
            update(Session)
            .where(Session.id == session_id)
            .values(last_activity=last_activity)
        )
        await self.db.commit()
        return result.rowcount == 1

    async def set_admin(self, session_id: str) -> int:
        """Flag a session as admin. Returns the number of updated rows."""
        result = await self.db.execute(
            update(Session).where(Session.id == session_id).values(is_admin=True)
        )
        await self.db.commit()
        return result.rowcount

    async def delete(self, session_id: str) -> bool:
        """Delete one session; its attempts and checkpoints go with it."""
        result = await self.db.execute(delete(Session).where(Session.id == session_id))
        await self.db.commit()
        return result.rowcount == 1

    async def delete_inactive_since(self, cutoff: int) -> int:
        """Delete every session whose last activity is strictly before cutoff."""
        result = await self.db.execute(
            delete(Session).where(Session.last_activity < cutoff)
        )
        await self.db.commit()
        return result.rowcount

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Session))
        return result.scalar_one()

    # --- Room attempts ---

    async def save_room_attempt(self, session_id: str, room_name: str, password_hash: str) -> None:
        """Store the password hash a session tried for a room, replacing any older one."""
        stmt = upsert(self.db, RoomAttempt).values(
            session_id=session_id,
            room_name=room_name,
            password_hash=password_hash,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["session_id", "room_name"],
            set_={"password_hash": stmt.excluded.password_hash},
        )
        await self.db.execute(stmt)
        await self.db.commit()

    async def get_room_attempt(self, session_id: str, room_name: str) -> str | None:
        result = await self.db.execute(
            select(RoomAttempt.password_hash).where(
                RoomAttempt.session_id == session_id,
                RoomAttempt.room_name == room_name,
            )
        )
        return result.scalar_one_or_none()

    # --- Room checkpoints ---

    async def save_checkpoint(self, session_id: str, room_name: str, timestamp: int) -> None:
        """
        Record that a session has received a room's messages up to timestamp.

        An existing checkpoint is only replaced by a later one, so a stale
        concurrent poll cannot move it backwards.
        """
        stmt = upsert(self.db, RoomUpdate).values(
            session_id=session_id,
            room_name=room_name,
            timestamp=timestamp,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["session_id", "room_name"],
            set_={"timestamp": stmt.excluded.timestamp},
            where=RoomUpdate.timestamp < stmt.excluded.timestamp,
        )
        await self.db.execute(stmt)
        await self.db.commit()

    async def get_checkpoint(self, session_id: str, room_name: str) -> int | None:
        result = await self.db.execute(
            select(RoomUpdate.timestamp).where(
                RoomUpdate.session_id == session_id,
                RoomUpdate.room_name == room_name,
            )
        )
        return result.scalar_one_or_none()
