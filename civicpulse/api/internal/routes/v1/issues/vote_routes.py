# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.db import get_async_session
from civicpulse.dependancies.common import get_current_user, get_current_user_optional
from civicpulse.models.auth.user import User
from civicpulse.schemas.issues.issue_schemas import IssueResponse
from civicpulse.schemas.issues.vote_schemas import VoteStatusResponse
from civicpulse.services.issues import vote_services

router = APIRouter(prefix="/votes", tags=["Votes"])


@router.get("/mine", response_model=list[IssueResponse])
async def list_voted_issues(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Issues the caller has voted on"""
    return await vote_services.list_voted_issues(db, current_user)


@router.post("/{issue_id}", response_model=IssueResponse)
async def cast_vote(
    issue_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Vote for an issue (once per account) and return the updated issue"""
    return await vote_services.cast_vote(db, current_user, issue_id)


@router.get("/{issue_id}/status", response_model=VoteStatusResponse)
async def get_vote_status(
    issue_id: UUID,
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_async_session),
):
    """Whether the caller has already voted on the issue"""
    return VoteStatusResponse(issue_id=issue_id, has_voted=await vote_services.has_voted(db, current_user, issue_id))
