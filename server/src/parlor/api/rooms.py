"""Room endpoints: entering a room, polling for updates, posting messages."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from parlor.api.deps import (
    ACCESS_DENIED,
    authorized_room,
    current_session,
    get_room_guard,
    get_synchronizer,
)
from parlor.clock import now_millis
from parlor.constraints import parse_room_name
from parlor.db import Message, Room, Session, get_db
from parlor.messages import UpdateSynchronizer
from parlor.rooms import RoomGuard
from parlor.welcome import TemplateVariables

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rooms"])


# --- Schemas ---


class RoomLogin(BaseModel):
    name: str
    # Plaintext; only its hash is stored
    password: str


class EnterRoomResponse(BaseModel):
    detail: str
    room: str


class RoomResponse(BaseModel):
    name: str
    created_at: int

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    """A message as sent to clients. The author is never included."""

    id: int
    content: str
    timestamp: int
    reply_to: int | None = Field(default=None, alias="replyTo")

    class Config:
        populate_by_name = True

    @classmethod
    def from_message(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            content=message.content,
            timestamp=message.timestamp,
            reply_to=message.reply_to,
        )


class UpdatesResponse(BaseModel):
    reset_required: bool = Field(alias="resetRequired")
    messages: list[MessageResponse]

    class Config:
        populate_by_name = True


class MessageCreate(BaseModel):
    content: str
    reply_to: int | None = None


class PostResponse(BaseModel):
    detail: str
    # The poster's cached view of the room may be out of date
    desynchronized: bool


class WelcomeMessageResponse(BaseModel):
    message: str


# --- Routes ---


@router.post("/enter_room", response_model=EnterRoomResponse)
async def enter_room(
    login: RoomLogin,
    session: Session = Depends(current_session),
    guard: RoomGuard = Depends(get_room_guard),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Save the caller's password attempt for a room, if it opens the room."""
    name = parse_room_name(login.name)

    if not await guard.check_password(name, login.password):
        logger.info("Rejected room login for %r", name)
        raise HTTPException(status_code=401, detail=ACCESS_DENIED)

    try:
        await guard.submit_attempt(session.id, name, login.password)
    except IntegrityError:
        # Room deleted after the password check
        await db.rollback()
        raise HTTPException(status_code=401, detail=ACCESS_DENIED)
    return {"detail": "You have entered the room.", "room": name}


@router.get("/room/{name}", response_model=RoomResponse)
async def get_room(room: Room = Depends(authorized_room)) -> Room:
    """Room details, for sessions allowed in."""
    return room


@router.get("/room/{name}/updates", response_model=UpdatesResponse)
async def get_message_updates(
    room: Room = Depends(authorized_room),
    session: Session = Depends(current_session),
    sync: UpdateSynchronizer = Depends(get_synchronizer),
    db: AsyncSession = Depends(get_db),
) -> UpdatesResponse:
    """
    Messages posted since the caller's previous poll of this room.

    Clients must discard their cached messages first when resetRequired
    is true.
    """
    try:
        updates = await sync.get_updates(session, room, now_millis())
    except IntegrityError:
        logger.info("Room %r deleted during a poll", room.name)
        await db.rollback()
        raise HTTPException(status_code=401, detail=ACCESS_DENIED)
    return UpdatesResponse(
        reset_required=updates.reset_required,
        messages=[MessageResponse.from_message(m) for m in updates.messages],
    )


@router.post("/room/{name}/post", response_model=PostResponse)
async def post_message(
    data: MessageCreate,
    room: Room = Depends(authorized_room),
    session: Session = Depends(current_session),
    sync: UpdateSynchronizer = Depends(get_synchronizer),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Post a message or a reply. Content is stored as sanitized HTML."""
    try:
        result = await sync.post_message(room, data.content, session.id, data.reply_to)
    except IntegrityError:
        logger.info("Room %r deleted before a post was saved", room.name)
        await db.rollback()
        raise HTTPException(status_code=401, detail=ACCESS_DENIED)
    return {
        "detail": "Your message has been saved.",
        "desynchronized": result.desynchronized,
    }


@router.get("/welcome_message", response_model=WelcomeMessageResponse)
async def get_welcome_message(db: AsyncSession = Depends(get_db)) -> dict:
    """The welcome message shown on the main page."""
    return {"message": await TemplateVariables(db).get_welcome_message()}
