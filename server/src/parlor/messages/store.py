"""Data access for messages. Messages are only ever appended and read."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parlor.db import Message


class MessageStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(
        self,
        room_id: int,
        content: str,
        timestamp: int,
        author: str | None = None,
        reply_to: int | None = None,
    ) -> Message:
        message = Message(
            room_id=room_id,
            content=content,
            timestamp=timestamp,
            author=author,
            reply_to=reply_to,
        )
        self.db.add(message)
        await self.db.commit()
        return message

    async def get(self, room_id: int, message_id: int) -> Message | None:
        result = await self.db.execute(
            select(Message).where(Message.room_id == room_id, Message.id == message_id)
        )
        return result.scalar_one_or_none()

    async def between(self, room_id: int, after: int, upto: int) -> list[Message]:
        """Messages of a room with after < timestamp <= upto, oldest first."""
        result = await self.db.execute(
            select(Message)
            .where(
                Message.room_id == room_id,
                Message.timestamp > after,
                Message.timestamp <= upto,
            )
            .order_by(Message.timestamp, Message.id)
        )
        return list(result.scalars().all())
