# Third-party imports
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.db import get_async_session
from civicpulse.core.exceptions import UnauthenticatedError
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.dependancies.common import get_current_user
from civicpulse.models.auth.user import User
from civicpulse.schemas.auth.token_schemas import Token
from civicpulse.schemas.auth.user_schemas import ProfileResponse, UserCreateRequest
from civicpulse.services.auth import authenticate_user, generate_token, register_user

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ProfileResponse, status_code=201)
async def register(request: UserCreateRequest, db: AsyncSession = Depends(get_async_session)):
    """Create an account and its profile"""
    user = await register_user(db, request)
    return ProfileResponse.model_validate(user)


@router.post("/token", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_async_session),
):
    """Exchange email (as username) and password for a bearer token"""
    user = await authenticate_user(db, form_data.username, form_data.password)
    if user is None:
        logger.info("Rejected login attempt")
        raise UnauthenticatedError("Incorrect email or password")
    return generate_token(user.id)


@router.get("/me", response_model=ProfileResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Profile of the signed-in user"""
    return ProfileResponse.model_validate(current_user)
