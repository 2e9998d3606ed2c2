# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.exceptions import BackendError, NotFoundError, ValidationFailedError
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.models.auth.user import User
from civicpulse.schemas.auth.user_schemas import ProfileResponse, ProfileUpdateRequest, UserCreateRequest
from civicpulse.utils.password_utils import get_password_hash, verify_password

logger = get_logger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, request: UserCreateRequest) -> User:
    if await get_user_by_email(db, request.email):
        raise ValidationFailedError("Email already registered")

    user = User(
        email=request.email.lower(),
        hashed_password=get_password_hash(request.password),
        name=request.name,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ValidationFailedError("Email already registered") from e
    await db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    """
    Return the user if the email/password pair is valid, otherwise None.
    """
    user = await get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def get_profile(db: AsyncSession, user_id: UUID) -> ProfileResponse:
    try:
        user = await db.get(User, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user profile: {e}")
        raise BackendError("Could not load the profile") from e
    if user is None:
        raise NotFoundError("Profile not found")
    return ProfileResponse.model_validate(user)


async def update_own_profile(db: AsyncSession, user: User, update_data: ProfileUpdateRequest) -> ProfileResponse:
    """Only the caller's own profile is ever touched."""
    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error updating profile: {e}")
        raise BackendError("Could not update the profile") from e
    await db.refresh(user)
    return ProfileResponse.model_validate(user)
