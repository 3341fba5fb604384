"""Limits enforced on user-provided data before it reaches the database."""

from parlor.errors import ConstraintViolation

# Maximum lengths, in bytes
MAX_MESSAGE_LEN = 2048
MAX_ROOM_NAME_LEN = 128
MAX_WELCOME_MESSAGE_LEN = 2048

_ROOM_NAME_EXTRA_CHARS = {"_", "-"}


def _is_room_name_char(ch: str) -> bool:
    return (ch.isascii() and ch.isalnum()) or ch in _ROOM_NAME_EXTRA_CHARS


def parse_room_name(name: str) -> str:
    """
    Check that a room name is valid and return it.

    Room names cannot be empty or longer than MAX_ROOM_NAME_LEN bytes, and
    may only contain ASCII letters, digits, '_' and '-'.

    Raises:
        ConstraintViolation: with a human-readable reason.
    """
    if not name:
        raise ConstraintViolation("The room name cannot be empty.")
    if len(name.encode("utf-8")) > MAX_ROOM_NAME_LEN:
        raise ConstraintViolation("The room name is too long.")
    if not all(_is_room_name_char(ch) for ch in name):
        raise ConstraintViolation("The room name contains invalid characters.")
    return name


def parse_message_content(content: str) -> str:
    """Check that a message is neither blank nor longer than MAX_MESSAGE_LEN bytes."""
    if not content or not content.strip():
        raise ConstraintViolation("The message cannot be empty.")
    if len(content.encode("utf-8")) > MAX_MESSAGE_LEN:
        raise ConstraintViolation("The message is too long.")
    return content


def parse_room_password(password: str) -> str:
    if not password:
        raise ConstraintViolation("The room password cannot be empty.")
    return password


def parse_welcome_message(message: str) -> str:
    if len(message.encode("utf-8")) > MAX_WELCOME_MESSAGE_LEN:
        raise ConstraintViolation("The welcome message is too long.")
    return message
