"""Admin-only endpoints for managing rooms and the welcome message."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from parlor.api.deps import admin_session, room_name
from parlor.constraints import parse_room_name, parse_room_password, parse_welcome_message
from parlor.db import get_db
from parlor.hashing import hash_password
from parlor.messages import sanitize_html
from parlor.rooms import RoomStore
from parlor.sessions import SessionStore
from parlor.welcome import TemplateVariables

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"], dependencies=[Depends(admin_session)])


# --- Schemas ---


class RoomCredentials(BaseModel):
    name: str
    password: str


class WelcomeMessageUpdate(BaseModel):
    message: str


class DetailResponse(BaseModel):
    detail: str


# --- Routes ---


@router.get("/session_count", response_model=int)
async def session_count(db: AsyncSession = Depends(get_db)) -> int:
    """Number of live sessions."""
    return await SessionStore(db).count()


@router.get("/active_rooms", response_model=list[str])
async def active_rooms(db: AsyncSession = Depends(get_db)) -> list[str]:
    """Names of all rooms, sorted."""
    return await RoomStore(db).names()


@router.post("/create_room", response_model=DetailResponse)
async def create_room(
    data: RoomCredentials,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Create a room. Names are unique."""
    name = parse_room_name(data.name)
    password = parse_room_password(data.password)

    rooms = RoomStore(db)
    if await rooms.get(name) is not None:
        raise HTTPException(status_code=409, detail="A room with this name already exists.")
    try:
        await rooms.create(name, hash_password(password))
    except IntegrityError:
        # Created concurrently by another request
        await db.rollback()
        raise HTTPException(status_code=409, detail="A room with this name already exists.")

    logger.info("Room %r created", name)
    return {"detail": "The room has been created."}


@router.delete("/delete_room/{name}", response_model=DetailResponse)
async def delete_room(
    name: str = Depends(room_name),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Delete a room with its messages, attempts and checkpoints."""
    if not await RoomStore(db).delete(name):
        raise HTTPException(status_code=404, detail="Room not found")
    logger.info("Room %r deleted", name)
    return {"detail": "The room has been deleted."}


@router.post("/change_room_password", response_model=DetailResponse)
async def change_room_password(
    data: RoomCredentials,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Change a room's password. Sessions using the old one lose access at once."""
    name = parse_room_name(data.name)
    password = parse_room_password(data.password)

    if not await RoomStore(db).change_password(name, hash_password(password)):
        raise HTTPException(status_code=404, detail="Room not found")
    return {"detail": "The password has been changed."}


@router.post("/welcome_message", response_model=DetailResponse)
async def set_welcome_message(
    data: WelcomeMessageUpdate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Replace the welcome message. The HTML is sanitized before saving."""
    message = sanitize_html(parse_welcome_message(data.message))
    await TemplateVariables(db).set_welcome_message(message)
    return {"detail": "The welcome message has been saved."}
