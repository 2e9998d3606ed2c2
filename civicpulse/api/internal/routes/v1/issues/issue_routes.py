# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.db import get_async_session
from civicpulse.core.exceptions import ValidationFailedError
from civicpulse.dependancies.common import get_current_user
from civicpulse.models.auth.user import User
from civicpulse.models.issues.issue import IssueCategory, IssueStatus
from civicpulse.schemas.issues.issue_schemas import (
    ImageUploadResponse,
    IssueCreate,
    IssueListResponse,
    IssueResponse,
    IssueUpdate,
    SortKey,
)
from civicpulse.services.issues import issue_services
from civicpulse.services.issues.filter_services import IssueCriteria, filter_issues
from civicpulse.services.issues.pagination_services import paginate
from civicpulse.services.storage.s3_service import S3Service, build_image_key, get_storage_service, validate_image
from civicpulse.settings import settings

router = APIRouter(prefix="/issues", tags=["Issues"])


@router.get("/", response_model=IssueListResponse)
async def list_issues(
    category: IssueCategory | None = None,
    status: IssueStatus | None = None,
    search: str = Query("", max_length=200),
    sort: SortKey = SortKey.NEWEST,
    page: int = 1,
    per_page: int = Query(settings.ISSUES_PAGE_SIZE, ge=1, le=settings.ISSUES_MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_async_session),
):
    """Browse issues: filter, search, sort and paginate the full collection"""
    issues = await issue_services.list_issues(db)
    criteria = IssueCriteria(category=category, status=status, search=search, sort=sort)
    result = paginate(filter_issues(issues, criteria), per_page, page)

    return IssueListResponse(
        issues=result.items,
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        total_pages=result.total_pages,
    )


@router.get("/mine", response_model=list[IssueResponse])
async def list_my_issues(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Issues reported by the caller, newest first"""
    return await issue_services.list_user_issues(db, current_user)


@router.post("/", response_model=IssueResponse, status_code=201)
async def create_issue(
    issue_data: IssueCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Report a new issue; it always starts out pending"""
    return await issue_services.create_issue(db, current_user, issue_data)


@router.post("/upload-image", response_model=ImageUploadResponse)
async def upload_image(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    storage: S3Service = Depends(get_storage_service),
):
    """Upload a photo for an issue and return its public URL"""
    data = await file.read()
    validate_image(file.content_type, len(data))
    if not data:
        raise ValidationFailedError("The uploaded file is empty")

    url = await storage.upload_file(data, build_image_key(current_user.id, file.filename), file.content_type)
    return ImageUploadResponse(url=url)


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(issue_id: UUID, db: AsyncSession = Depends(get_async_session)):
    """Get issue details"""
    return await issue_services.get_issue(db, issue_id)


@router.patch("/{issue_id}", response_model=IssueResponse)
async def update_issue(
    issue_id: UUID,
    update_data: IssueUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update an issue (reporter only, while pending)"""
    return await issue_services.update_issue(db, current_user, issue_id, update_data)


@router.delete("/{issue_id}")
async def delete_issue(
    issue_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete an issue (reporter only, while pending)"""
    await issue_services.delete_issue(db, current_user, issue_id)
    return {"message": "Issue deleted successfully"}
