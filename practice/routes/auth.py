from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.ext.asyncio import AsyncSession
from practice.db import get_session
from practice.auth_deps import get_current_user, subject_id
from practice.models.user import User
from practice.schemas.auth import UserPublic, TokenPair
from practice.security import make_access_token, make_refresh_token, decode_token

router = APIRouter(prefix="/auth", tags=["auth"])

def user_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.id,
        key=user.key,
        username=user.username,
        email=user.email,
        avatar_url=user.avatar_url,
        created_at=user.created_at,
    )

@router.post("/refresh", response_model=TokenPair)
async def refresh(authorization: str | None = Header(None), session: AsyncSession = Depends(get_session)):
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing refresh token")
    token = authorization.split(" ", 1)[1]
    try:
        data = decode_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid token")
    if data.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Wrong token type")
    # deleted accounts cannot refresh
    user = await session.get(User, subject_id(data))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    sub = str(user.id)
    return TokenPair(access=make_access_token(sub), refresh=make_refresh_token(sub))

@router.get("/me", response_model=UserPublic)
async def me(user: User = Depends(get_current_user)):
    return user_public(user)
