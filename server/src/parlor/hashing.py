"""Password digests as stored in the database."""

import hashlib


def hash_password(password: str) -> str:
    """Return the hex SHA-256 digest of a password."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()
