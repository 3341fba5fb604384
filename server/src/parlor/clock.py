"""Timestamps and session identifiers."""

import secrets
import string
import time

SESSION_ID_LEN = 64
_ALPHABET = string.ascii_letters + string.digits


def now_seconds() -> int:
    """Unix time in seconds, used for session activity."""
    return int(time.time())


def now_millis() -> int:
    """Unix time in milliseconds, used for messages, rooms and checkpoints.

    Several messages can arrive within the same second, so these need the
    extra precision.
    """
    return time.time_ns() // 1_000_000


def new_session_id() -> str:
    """Return a fresh random alphanumeric session id (~380 bits)."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(SESSION_ID_LEN))
