"""Sessions: storage, per-request management and background reclamation."""

from .manager import SessionManager
from .reclaimer import SessionReclaimer
from .store import SessionStore

__all__ = ["SessionManager", "SessionReclaimer", "SessionStore"]
