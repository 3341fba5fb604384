"""Request-scoped session logic: resolve, issue, keep alive, elevate."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from parlor.clock import SESSION_ID_LEN, new_session_id, now_seconds
from parlor.db import Session
from parlor.errors import SessionExpired
from parlor.sessions.store import SessionStore

logger = logging.getLogger(__name__)


def _short(session_id: str) -> str:
    """Loggable prefix of a session id. Full ids are never logged."""
    return session_id[:8]


def is_well_formed(token: str) -> bool:
    return len(token) == SESSION_ID_LEN and token.isascii() and token.isalnum()


class SessionManager:
    """
    Decides which session a request belongs to.

    - No token: a new session is issued
    - Token that resolves: the session is kept alive
    - Token that does not resolve: SessionExpired, never a silent new session
    """

    def __init__(self, store: SessionStore):
        self.store = store

    async def resolve(self, token: str) -> Session | None:
        """Look up a session by token. None means absent, malformed or reclaimed."""
        if not token or not is_well_formed(token):
            return None
        return await self.store.get(token)

    async def issue_new(self) -> Session:
        session = await self.store.insert(new_session_id(), now_seconds())
        logger.info("Issued new session %s", _short(session.id))
        return session

    async def keep_alive(self, session: Session) -> bool:
        """
        Bump the session's last activity.

        Failure is logged and reported as False; it never fails the request.
        """
        now = now_seconds()
        try:
            await self.store.touch(session.id, now)
        except SQLAlchemyError:
            logger.warning("Could not keep session %s alive", _short(session.id), exc_info=True)
            # Keep the session readable after the rollback
            await self.store.rollback(session)
            return False
        session.last_activity = now
        return True

    async def elevate_to_admin(self, session: Session) -> bool:
        """
        Grant admin rights to exactly this session.

        Must only be called after the admin credentials were verified.
        Returns False if the session vanished in the meantime.
        """
        if await self.store.set_admin(session.id) != 1:
            logger.warning("Session %s vanished before admin elevation", _short(session.id))
            return False
        session.is_admin = True
        logger.info("Session %s elevated to admin", _short(session.id))
        return True

    async def resolve_or_issue(self, token: str | None) -> tuple[Session, bool]:
        """
        Find the session for a request, or start one.

        Returns:
            (session, issued) where issued is True for a brand new session.

        Raises:
            SessionExpired: a token was presented but matches no session.
        """
        if token is None:
            return await self.issue_new(), True

        session = await self.resolve(token)
        if session is None:
            logger.info("Expired or unknown session token presented")
            raise SessionExpired()

        await self.keep_alive(session)
        return session, False
