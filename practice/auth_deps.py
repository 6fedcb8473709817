from __future__ import annotations
import uuid
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from practice.db import get_session
from practice.security import decode_token
from practice.models.user import User

security = HTTPBearer()

def subject_id(data: dict) -> uuid.UUID:
    try:
        return uuid.UUID(str(data.get("sub")))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token subject")

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> User:
    token = credentials.credentials
    try:
        data = decode_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid token")
    if data.get("type") != "access":
        raise HTTPException(status_code=401, detail="Wrong token type")
    user = await session.get(User, subject_id(data))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user
