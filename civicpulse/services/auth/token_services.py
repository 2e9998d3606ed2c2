# Standard library imports
from datetime import UTC, datetime, timedelta
from typing import Any
import uuid

# Third-party imports
from jose import JWTError, jwt

# Local application imports
from civicpulse.core.exceptions import UnauthenticatedError
from civicpulse.schemas.auth.token_schemas import Token
from civicpulse.settings import settings


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT whose ``sub`` is the user id."""
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": subject, "exp": expire, "jti": str(uuid.uuid4())}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def generate_token(user_id: uuid.UUID) -> Token:
    return Token(
        access_token=create_access_token(str(user_id)),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise UnauthenticatedError("Could not validate credentials") from e
    if payload.get("sub") is None:
        raise UnauthenticatedError("Could not validate credentials")
    return payload
