# Local application imports
from civicpulse.schemas.auth.token_schemas import Token
from civicpulse.schemas.auth.user_schemas import ProfileResponse, ProfileUpdateRequest, UserCreateRequest

__all__ = [
    "ProfileResponse",
    "ProfileUpdateRequest",
    "Token",
    "UserCreateRequest",
]
