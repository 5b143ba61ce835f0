"""
Password hashing (bcrypt) and admin bearer tokens (JWT).

The signed-in admin is resolved per request by `get_current_admin` (or
`get_streaming_admin` for SSE); there is no cached copy of the current user
anywhere else in the process.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from court_rental.core.config import Settings
from court_rental.core.context import AppContext, get_context
from court_rental.db.session import get_db
from court_rental.models.admin_user import AdminUser

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return jwt.encode({**data, "exp": expire}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str, settings: Settings) -> int:
    """Return the admin id carried in a token, or raise 401."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return int(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        raise _unauthorized("Invalid or expired token")


async def _load_admin(
    db: AsyncSession,
    credentials: Optional[HTTPAuthorizationCredentials],
    settings: Settings,
) -> AdminUser:
    if credentials is None:
        raise _unauthorized("Not authenticated")

    admin_id = decode_access_token(credentials.credentials, settings)
    result = await db.execute(select(AdminUser).where(AdminUser.id == admin_id))
    admin = result.scalar_one_or_none()
    if not admin or not admin.is_active:
        raise _unauthorized("Invalid or expired token")
    return admin


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_db),
) -> AdminUser:
    return await _load_admin(db, credentials, ctx.settings)


async def get_streaming_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ctx: AppContext = Depends(get_context),
) -> AdminUser:
    """
    Admin for long-lived responses. Uses its own session, closed before the
    response starts, so an open stream does not hold a pooled connection.
    """
    async with ctx.session_factory() as session:
        return await _load_admin(session, credentials, ctx.settings)
