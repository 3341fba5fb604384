"""Per-request dependencies: database, session, room access, admin rights.

Within one request FastAPI resolves these in order (database, then
session, then room) and caches each, so all of them share one database
session.
"""

from fastapi import Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from parlor.config import settings
from parlor.constraints import parse_room_name
from parlor.db import Room, Session, get_db
from parlor.messages import MessageStore, UpdateSynchronizer
from parlor.rooms import RoomGuard, RoomStore
from parlor.sessions import SessionManager, SessionStore

ACCESS_DENIED = "Credentials are not valid."


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        session_id,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


async def issue_session_cookie(request: Request, call_next) -> Response:
    """HTTP middleware: send the cookie of a session issued during the request."""
    request.state.issued_session_id = None
    response = await call_next(request)
    if request.state.issued_session_id is not None:
        set_session_cookie(response, request.state.issued_session_id)
    return response


def get_session_manager(db: AsyncSession = Depends(get_db)) -> SessionManager:
    return SessionManager(SessionStore(db))


def get_room_guard(db: AsyncSession = Depends(get_db)) -> RoomGuard:
    return RoomGuard(RoomStore(db), SessionStore(db))


def get_synchronizer(db: AsyncSession = Depends(get_db)) -> UpdateSynchronizer:
    return UpdateSynchronizer(SessionStore(db), MessageStore(db))


async def current_session(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
) -> Session:
    """
    The session of the request.

    A request without a cookie gets a new session. Its id goes on
    request.state for issue_session_cookie, which sets the cookie on
    whatever response the request ends with, errors included. A request
    whose cookie no longer matches a session raises SessionExpired.
    """
    token = request.cookies.get(settings.session_cookie_name) or None
    session, issued = await manager.resolve_or_issue(token)
    if issued:
        request.state.issued_session_id = session.id
    return session


async def admin_session(session: Session = Depends(current_session)) -> Session:
    if not session.is_admin:
        raise HTTPException(status_code=403, detail="You do not have permission to access this page.")
    return session


def room_name(name: str) -> str:
    """Validated room name from the path. Invalid names never reach the database."""
    return parse_room_name(name)


async def authorized_room(
    name: str = Depends(room_name),
    session: Session = Depends(current_session),
    guard: RoomGuard = Depends(get_room_guard),
) -> Room:
    """
    The room named in the path, if the session may access it.

    Missing rooms and wrong passwords produce the same 401, so probing
    does not reveal which rooms exist.
    """
    access = await guard.authorize(session.id, name)
    if not access.granted:
        raise HTTPException(status_code=401, detail=ACCESS_DENIED)
    return access.room
