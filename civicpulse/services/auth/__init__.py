# Local application imports
from civicpulse.services.auth.token_services import create_access_token, decode_access_token, generate_token
from civicpulse.services.auth.user_services import (
    authenticate_user,
    get_profile,
    get_user_by_email,
    register_user,
    update_own_profile,
)

__all__ = [
    "authenticate_user",
    "create_access_token",
    "decode_access_token",
    "generate_token",
    "get_profile",
    "get_user_by_email",
    "register_user",
    "update_own_profile",
]
