"""Database module for Parlor."""

from .models import Admin, Base, Message, Room, RoomAttempt, RoomUpdate, Session, TemplateVariable
from .session import DATABASE_URL, async_session, engine, get_db, make_engine, upsert

__all__ = [
    "Admin",
    "Base",
    "Message",
    "Room",
    "RoomAttempt",
    "RoomUpdate",
    "Session",
    "TemplateVariable",
    "DATABASE_URL",
    "async_session",
    "engine",
    "get_db",
    "make_engine",
    "upsert",
]
