"""Rooms: storage and access control."""

from .guard import Access, AccessStatus, RoomGuard
from .store import RoomStore

__all__ = ["Access", "AccessStatus", "RoomGuard", "RoomStore"]
