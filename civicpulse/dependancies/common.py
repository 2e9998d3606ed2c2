# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.db import get_async_session
from civicpulse.core.exceptions import CivicPulseError, UnauthenticatedError
from civicpulse.models.auth.user import User
from civicpulse.services.auth.token_services import decode_access_token
from civicpulse.settings import settings

# OAuth2PasswordBearer for token extraction
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/token", auto_error=False)


async def _load_user(token: str, db: AsyncSession) -> User:
    payload = decode_access_token(token)
    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError as e:
        raise UnauthenticatedError("Could not validate credentials") from e

    user = await db.get(User, user_id)
    if user is None:
        raise UnauthenticatedError("Could not validate credentials")
    return user


async def get_current_user_optional(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_async_session),
) -> User | None:
    """Get current user if a valid token is provided, otherwise return None"""
    if not token:
        return None
    try:
        return await _load_user(token, db)
    except CivicPulseError:
        return None


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """Get current user from JWT token"""
    if not token:
        raise UnauthenticatedError()
    return await _load_user(token, db)
