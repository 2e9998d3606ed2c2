"""
Issue repository: reads and owner-scoped mutations of issue records.

All functions return normalized ``IssueResponse`` records and raise typed errors
from ``civicpulse.core.exceptions``; database failures are logged and re-raised
as ``BackendError``.
"""

# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.exceptions import BackendError, IssueLockedError, NotFoundError, ValidationFailedError
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.models.auth.user import User
from civicpulse.models.issues.issue import Issue, IssueStatus
from civicpulse.schemas.issues.issue_schemas import IssueCreate, IssueResponse, IssueUpdate

logger = get_logger(__name__)


def to_response(issue: Issue) -> IssueResponse:
    return IssueResponse.model_validate(issue)


async def list_issues(db: AsyncSession) -> list[IssueResponse]:
    """Every issue, newest first."""
    try:
        result = await db.execute(select(Issue).order_by(Issue.created_at.desc()))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching issues: {e}")
        raise BackendError("Could not load issues") from e
    return [to_response(issue) for issue in result.scalars().all()]


async def list_user_issues(db: AsyncSession, user: User) -> list[IssueResponse]:
    try:
        result = await db.execute(
            select(Issue).where(Issue.user_id == user.id).order_by(Issue.created_at.desc())
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user issues: {e}")
        raise BackendError("Could not load your issues") from e
    return [to_response(issue) for issue in result.scalars().all()]


async def get_issue_model(db: AsyncSession, issue_id: UUID) -> Issue:
    try:
        issue = await db.get(Issue, issue_id)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching issue {issue_id}: {e}")
        raise BackendError("Could not load the issue") from e
    if issue is None:
        raise NotFoundError("Issue not found")
    return issue


async def get_issue(db: AsyncSession, issue_id: UUID) -> IssueResponse:
    return to_response(await get_issue_model(db, issue_id))


async def _get_owned_issue(db: AsyncSession, user: User, issue_id: UUID) -> Issue:
    """Missing and foreign issues look the same to the caller."""
    issue = await get_issue_model(db, issue_id)
    if issue.user_id != user.id:
        raise NotFoundError("Issue not found")
    if issue.status != IssueStatus.PENDING:
        raise IssueLockedError()
    return issue


async def _commit(db: AsyncSession, action: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error {action}: {e}")
        raise BackendError(f"Could not complete the request while {action}") from e


async def create_issue(db: AsyncSession, user: User, issue_data: IssueCreate) -> IssueResponse:
    """Create an issue owned by ``user``; the requested status is ignored."""
    fields = issue_data.model_dump(exclude={"status"})
    new_issue = Issue(**fields, status=IssueStatus.PENDING, votes=0, user_id=user.id)

    db.add(new_issue)
    await _commit(db, "creating issue")
    await db.refresh(new_issue)

    logger.info(f"Issue {new_issue.id} reported by user {user.id}")
    return to_response(new_issue)


async def update_issue(db: AsyncSession, user: User, issue_id: UUID, update_data: IssueUpdate) -> IssueResponse:
    issue = await _get_owned_issue(db, user, issue_id)

    changes = update_data.model_dump(exclude_unset=True)
    for field in ("title", "description", "category", "location", "status"):
        if field in changes and changes[field] is None:
            raise ValidationFailedError(f"{field} cannot be empty")

    latitude = changes.get("latitude", issue.latitude)
    longitude = changes.get("longitude", issue.longitude)
    if (latitude is None) != (longitude is None):
        raise ValidationFailedError("Latitude and longitude must be provided together")

    for field, value in changes.items():
        setattr(issue, field, value)

    await _commit(db, "updating issue")
    await db.refresh(issue)
    return to_response(issue)


async def delete_issue(db: AsyncSession, user: User, issue_id: UUID) -> None:
    issue = await _get_owned_issue(db, user, issue_id)
    await db.delete(issue)
    await _commit(db, "deleting issue")
    logger.info(f"Issue {issue_id} deleted by user {user.id}")
