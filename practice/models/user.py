from __future__ import annotations
import enum
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, DateTime, Index, Uuid, func
from practice.db import Base
from practice.services.keys import generate_key


class UsernameState(str, enum.Enum):
    NONE = "none"      # never set
    EMPTY = "empty"    # released to another account on collision
    TAKEN = "taken"

    @classmethod
    def of(cls, username: str | None) -> "UsernameState":
        if username is None:
            return cls.NONE
        if username == "":
            return cls.EMPTY
        return cls.TAKEN


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    key: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, default=generate_key)

    external_id: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)  # OAuth provider id
    username: Mapped[str | None] = mapped_column(String(64), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text(), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def username_state(self) -> UsernameState:
        return UsernameState.of(self.username)

    @property
    def is_guest(self) -> bool:
        """Registered accounts are never guests; guests are not persisted."""
        return False


# one owner per non-empty username, compared case-insensitively
Index(
    "uq_users_username_lower",
    func.lower(User.username),
    unique=True,
    postgresql_where=User.username != "",
    sqlite_where=User.username != "",
)
