# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.db import get_async_session
from civicpulse.dependancies.common import get_current_user
from civicpulse.models.auth.user import User
from civicpulse.schemas.auth.user_schemas import ProfileResponse, ProfileUpdateRequest
from civicpulse.services.auth import get_profile, update_own_profile

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    update_data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update the caller's own name and bio"""
    return await update_own_profile(db, current_user, update_data)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_user_profile(user_id: UUID, db: AsyncSession = Depends(get_async_session)):
    return await get_profile(db, user_id)
