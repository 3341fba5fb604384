"""Per-request room authorization."""

import enum
import logging
from dataclasses import dataclass

from parlor.db import Room
from parlor.hashing import hash_password
from parlor.rooms.store import RoomStore
from parlor.sessions.store import SessionStore

logger = logging.getLogger(__name__)


class AccessStatus(enum.Enum):
    AUTHORIZED = "authorized"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"


@dataclass
class Access:
    """Outcome of a room access check. room is set only when authorized."""
    status: AccessStatus
    room: Room | None = None

    @property
    def granted(self) -> bool:
        return self.status is AccessStatus.AUTHORIZED


class RoomGuard:
    """
    Decides whether a session may enter a room.

    A session is let in only while the hash of its last submitted password
    equals the room's current password hash. The check reads both values on
    every call, so changing a room's password locks out stale attempts on
    their next request.
    """

    def __init__(self, rooms: RoomStore, sessions: SessionStore):
        self.rooms = rooms
        self.sessions = sessions

    async def authorize(self, session_id: str, room_name: str) -> Access:
        room = await self.rooms.get(room_name)
        if room is None:
            logger.info("Access to missing room %r denied", room_name)
            return Access(AccessStatus.NOT_FOUND)

        attempt = await self.sessions.get_room_attempt(session_id, room_name)
        if attempt is None:
            logger.info("Access to room %r denied: no password attempt", room_name)
            return Access(AccessStatus.UNAUTHORIZED)

        if attempt != room.password_hash:
            logger.info("Access to room %r denied: password does not match", room_name)
            return Access(AccessStatus.UNAUTHORIZED)

        return Access(AccessStatus.AUTHORIZED, room)

    async def submit_attempt(self, session_id: str, room_name: str, password: str) -> None:
        """Hash a plaintext password and store it as the session's attempt for the room."""
        await self.sessions.save_room_attempt(session_id, room_name, hash_password(password))

    async def check_password(self, room_name: str, password: str) -> bool:
        """Whether password opens the room. False if the room does not exist."""
        room = await self.rooms.get(room_name)
        return room is not None and room.password_hash == hash_password(password)
