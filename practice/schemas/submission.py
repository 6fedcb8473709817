from __future__ import annotations
from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime


class SubmissionPublic(BaseModel):
    id: UUID
    user_id: UUID
    language: str
    slug: str
    version: int
    created_at: datetime


class CommentCreate(BaseModel):
    body: str = Field(min_length=1, max_length=10000)


class CommentPublic(BaseModel):
    id: UUID
    submission_id: UUID
    user_id: UUID
    body: str
    created_at: datetime
    counted: bool = False   # whether this comment consumed a daily review


class DailyCount(BaseModel):
    total: int
    available: bool
