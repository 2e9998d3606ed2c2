# Standard library imports
from uuid import UUID

# Third-party imports
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.exceptions import AlreadyVotedError, BackendError
from civicpulse.core.monitoring.logging import get_contextual_logger, get_logger
from civicpulse.models.auth.user import User
from civicpulse.models.issues.issue import Issue
from civicpulse.models.issues.vote import Vote
from civicpulse.schemas.issues.issue_schemas import IssueResponse
from civicpulse.services.issues.issue_services import get_issue_model, to_response

logger = get_logger(__name__)


async def has_voted(db: AsyncSession, user: User | None, issue_id: UUID) -> bool:
    """Anonymous viewers have never voted."""
    if user is None:
        return False
    try:
        vote_id = await db.scalar(select(Vote.id).where(Vote.issue_id == issue_id, Vote.user_id == user.id))
    except SQLAlchemyError as e:
        logger.error(f"Error checking vote: {e}")
        raise BackendError("Could not check your vote") from e
    return vote_id is not None


async def cast_vote(db: AsyncSession, user: User, issue_id: UUID) -> IssueResponse:
    """
    Record one vote by ``user`` on the issue and bump its counter by exactly one.

    The pre-check gives a clean error for the common case; the unique constraint on
    (issue_id, user_id) rejects concurrent duplicates, which surface as the same
    ``AlreadyVotedError`` with nothing written.
    """
    vote_logger = get_contextual_logger(__name__, issue_id=issue_id, user_id=user.id)
    issue = await get_issue_model(db, issue_id)

    if await has_voted(db, user, issue_id):
        raise AlreadyVotedError()

    try:
        db.add(Vote(issue_id=issue_id, user_id=user.id))
        await db.execute(update(Issue).where(Issue.id == issue_id).values(votes=Issue.votes + 1))
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        vote_logger.info("Duplicate vote rejected by unique constraint")
        raise AlreadyVotedError() from e
    except SQLAlchemyError as e:
        await db.rollback()
        vote_logger.error(f"Error creating vote: {e}")
        raise BackendError("Could not record your vote") from e

    await db.refresh(issue)
    vote_logger.info(f"Vote recorded, issue now has {issue.votes} votes")
    return to_response(issue)


async def list_voted_issues(db: AsyncSession, user: User) -> list[IssueResponse]:
    """Issues the user voted on, newest first."""
    try:
        result = await db.execute(
            select(Issue)
            .join(Vote, Vote.issue_id == Issue.id)
            .where(Vote.user_id == user.id)
            .order_by(Issue.created_at.desc())
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user votes: {e}")
        raise BackendError("Could not load the issues you voted on") from e
    return [to_response(issue) for issue in result.scalars().all()]
