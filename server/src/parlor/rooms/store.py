"""Data access for rooms."""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from parlor.clock import now_millis
from parlor.db import Room


class RoomStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, name: str) -> Room | None:
        result = await self.db.execute(
            select(Room)
            .where(Room.name == name)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, name: str, password_hash: str, created_at: int | None = None) -> Room:
        """Create a room. Raises IntegrityError if the name is taken."""
        room = Room(
            name=name,
            password_hash=password_hash,
            created_at=now_millis() if created_at is None else created_at,
        )
        self.db.add(room)
        await self.db.commit()
        return room

    async def delete(self, name: str) -> bool:
        """Delete a room with its messages and every session's attempts and checkpoints."""
        result = await self.db.execute(delete(Room).where(Room.name == name))
        await self.db.commit()
        return result.rowcount == 1

    async def change_password(self, name: str, password_hash: str) -> bool:
        result = await self.db.execute(
            update(Room).where(Room.name == name).values(password_hash=password_hash)
        )
        await self.db.commit()
        return result.rowcount == 1

    async def names(self) -> list[str]:
        result = await self.db.execute(select(Room.name).order_by(Room.name))
        return list(result.scalars().all())
