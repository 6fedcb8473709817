from __future__ import annotations
import uuid
from datetime import datetime
from typing import NamedTuple
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from practice.db import Base


class Problem(NamedTuple):
    language: str
    slug: str


class ACL(Base):
    """Grant allowing a user to review submissions for one problem."""
    __tablename__ = "acl"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    language: Mapped[str] = mapped_column(String(64), nullable=False)
    slug: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "language", "slug", name="uq_acl_user_problem"),
    )
