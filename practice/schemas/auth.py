from __future__ import annotations
from pydantic import BaseModel
from uuid import UUID
from datetime import datetime

class UserPublic(BaseModel):
    id: UUID
    key: str
    username: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    created_at: datetime

class TokenPair(BaseModel):
    access: str
    refresh: str
