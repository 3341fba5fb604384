"""Incremental room updates: send each session only what it has not seen."""

import logging
from dataclasses import dataclass, field

from parlor.clock import now_millis
from parlor.constraints import parse_message_content
from parlor.db import Message, Room, Session
from parlor.errors import ConstraintViolation
from parlor.messages.prepare import prepare_for_storage
from parlor.messages.store import MessageStore
from parlor.sessions.store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class Updates:
    """
    Messages to send in reply to a poll.

    reset_required tells the client to drop its cached messages for the room
    before applying these, because the room was recreated since its last poll.
    """
    reset_required: bool
    messages: list[Message] = field(default_factory=list)


@dataclass
class PostResult:
    message: Message
    # Advisory: the poster's view of the room predates its creation
    desynchronized: bool


class UpdateSynchronizer:
    """
    Computes and records per-session progress through a room's messages.

    Delivery is at-least-once. The checkpoint is read, messages in
    (checkpoint, now] are fetched, then the checkpoint is set to now. If the
    write fails, the next poll starts from the old checkpoint and resends
    the same messages, which clients apply idempotently.
    """

    def __init__(self, sessions: SessionStore, messages: MessageStore):
        self.sessions = sessions
        self.messages = messages

    async def last_checkpoint(self, session_id: str, room: Room) -> int:
        """The session's checkpoint for a room, 0 if it never polled it."""
        checkpoint = await self.sessions.get_checkpoint(session_id, room.name)
        return 0 if checkpoint is None else checkpoint

    async def get_updates(self, session: Session, room: Room, now: int | None = None) -> Updates:
        if now is None:
            now = now_millis()

        checkpoint = await self.last_checkpoint(session.id, room)
        # A checkpoint at or before the room's creation belongs to an older
        # room with the same name (or to no poll at all).
        reset_required = checkpoint <= room.created_at

        messages = await self.messages.between(room.id, checkpoint, now)
        await self.sessions.save_checkpoint(session.id, room.name, now)

        logger.debug(
            "Poll of room %r: %d messages since %d (reset=%s)",
            room.name,
            len(messages),
            checkpoint,
            reset_required,
        )
        return Updates(reset_required=reset_required, messages=messages)

    async def is_desynchronized(self, session_id: str, room: Room) -> bool:
        return await self.last_checkpoint(session_id, room) <= room.created_at

    async def post_message(
        self,
        room: Room,
        content: str,
        author_id: str | None,
        reply_to: int | None = None,
        now: int | None = None,
    ) -> PostResult:
        """
        Validate, prepare and store a new message.

        Replies must point at a thread-starting message of the same room.

        Raises:
            ConstraintViolation: for empty or oversized content, or a bad reply_to.
        """
        parse_message_content(content)

        if reply_to is not None:
            parent = await self.messages.get(room.id, reply_to)
            if parent is None:
                raise ConstraintViolation("The message you are replying to does not exist.")
            if parent.reply_to is not None:
                raise ConstraintViolation("Replies can only be made to the first message of a thread.")

        desynchronized = False
        if author_id is not None:
            desynchronized = await self.is_desynchronized(author_id, room)

        message = await self.messages.add(
            room_id=room.id,
            content=prepare_for_storage(content),
            timestamp=now_millis() if now is None else now,
            author=author_id,
            reply_to=reply_to,
        )
        return PostResult(message=message, desynchronized=desynchronized)
