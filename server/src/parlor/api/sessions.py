"""Session endpoints: who am I, and admin login."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from parlor.admins import AdminStore
from parlor.api.deps import current_session, get_session_manager
from parlor.db import Session, get_db
from parlor.sessions import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions"])


# --- Schemas ---


class SessionResponse(BaseModel):
    is_admin: bool

    class Config:
        from_attributes = True


class AdminLogin(BaseModel):
    username: str
    password: str


class DetailResponse(BaseModel):
    detail: str


# --- Routes ---


@router.get("/session", response_model=SessionResponse)
async def get_current_session(
    session: Session = Depends(current_session),
) -> Session:
    """Resolve (or start) the caller's session and report its rights."""
    return session


@router.post("/admin_login", response_model=DetailResponse)
async def admin_login(
    login: AdminLogin,
    session: Session = Depends(current_session),
    manager: SessionManager = Depends(get_session_manager),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Check admin credentials and, if valid, make the caller's session an admin one."""
    if session.is_admin:
        return {"detail": "You are already logged in as admin."}

    if not await AdminStore(db).verify(login.username, login.password):
        logger.info("Rejected admin login for %r", login.username)
        raise HTTPException(status_code=401, detail="Credentials are not valid.")

    if not await manager.elevate_to_admin(session):
        raise HTTPException(status_code=409, detail="Could not log you in as admin.")

    return {"detail": "You are now logged in as admin."}
