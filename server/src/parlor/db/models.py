"""SQLAlchemy models for sessions, rooms and messages."""

from sqlalchemy import BigInteger, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from parlor.clock import SESSION_ID_LEN
from parlor.constraints import MAX_ROOM_NAME_LEN

# Length of a hex-encoded SHA-256 digest
HASH_LEN = 64


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Session(Base):
    """
    A visitor's server-side session.

    The cookie only carries the id; everything else lives here. Admin rights
    are a flag on the session, granted after the admin credentials check.
    """

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(SESSION_ID_LEN), primary_key=True)
    # Unix seconds
    last_activity: Mapped[int] = mapped_column(BigInteger, index=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)

    room_attempts: Mapped[list["RoomAttempt"]] = relationship(
        back_populates="session", cascade="all, delete-orphan", passive_deletes=True
    )
    room_updates: Mapped[list["RoomUpdate"]] = relationship(
        back_populates="session", cascade="all, delete-orphan", passive_deletes=True
    )


class RoomAttempt(Base):
    """The last password hash a session submitted for a room."""

    __tablename__ = "room_attempts"

    session_id: Mapped[str] = mapped_column(
        String(SESSION_ID_LEN),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    room_name: Mapped[str] = mapped_column(
        String(MAX_ROOM_NAME_LEN),
        ForeignKey("rooms.name", ondelete="CASCADE"),
        primary_key=True,
    )
    password_hash: Mapped[str] = mapped_column(String(HASH_LEN))

    session: Mapped["Session"] = relationship(back_populates="room_attempts")


class RoomUpdate(Base):
    """Checkpoint: up to when a session has received a room's messages."""

    __tablename__ = "room_updates"

    session_id: Mapped[str] = mapped_column(
        String(SESSION_ID_LEN),
        ForeignKey("sessions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    room_name: Mapped[str] = mapped_column(
        String(MAX_ROOM_NAME_LEN),
        ForeignKey("rooms.name", ondelete="CASCADE"),
        primary_key=True,
    )
    # Unix milliseconds
    timestamp: Mapped[int] = mapped_column(BigInteger)

    session: Mapped["Session"] = relationship(back_populates="room_updates")


class Room(Base):
    """A password-protected container of message threads."""

    __tablename__ = "rooms"
    # Never reuse ids of deleted rooms
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(MAX_ROOM_NAME_LEN), unique=True)
    password_hash: Mapped[str] = mapped_column(String(HASH_LEN))
    # Unix milliseconds
    created_at: Mapped[int] = mapped_column(BigInteger)

    messages: Mapped[list["Message"]] = relationship(
        back_populates="room", cascade="all, delete-orphan", passive_deletes=True
    )


class Message(Base):
    """
    A message posted to a room.

    Messages with reply_to unset start a thread; replies point at the
    message which started their thread. The author is forgotten when the
    authoring session is deleted.
    """

    __tablename__ = "messages"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="CASCADE"), index=True
    )
    content: Mapped[str] = mapped_column(Text)
    # Unix milliseconds
    timestamp: Mapped[int] = mapped_column(BigInteger, index=True)
    author: Mapped[str | None] = mapped_column(
        String(SESSION_ID_LEN), ForeignKey("sessions.id", ondelete="SET NULL")
    )
    reply_to: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("messages.id", ondelete="CASCADE")
    )

    room: Mapped["Room"] = relationship(back_populates="messages")


class Admin(Base):
    """Administrator credentials, provisioned outside the application."""

    __tablename__ = "admins"

    username: Mapped[str] = mapped_column(String(255), primary_key=True)
    password_hash: Mapped[str] = mapped_column(String(HASH_LEN))


class TemplateVariable(Base):
    """Named values shown on pages, such as the welcome message."""

    __tablename__ = "template_variables"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
