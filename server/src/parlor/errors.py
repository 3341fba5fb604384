"""Exceptions shared across the application."""


class ConstraintViolation(ValueError):
    """User input that breaks a constraint. The message is shown to the user."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class SessionExpired(Exception):
    """A session token was presented but no longer matches a stored session."""
