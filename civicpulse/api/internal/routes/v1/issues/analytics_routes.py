# Third-party imports
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.db import get_async_session
from civicpulse.schemas.issues.analytics_schemas import CategoryCount, DailyCount, MapIssue
from civicpulse.schemas.issues.issue_schemas import IssueResponse
from civicpulse.services.analytics import analytics_services
from civicpulse.services.issues import issue_services
from civicpulse.settings import settings

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/categories", response_model=list[CategoryCount])
async def get_category_distribution(db: AsyncSession = Depends(get_async_session)):
    """Number of issues per category"""
    return await analytics_services.get_category_distribution(db)


@router.get("/temporal", response_model=list[DailyCount])
async def get_temporal_analysis(
    days: int = Query(settings.TEMPORAL_WINDOW_DAYS, ge=1, le=366),
    db: AsyncSession = Depends(get_async_session),
):
    """Issues reported per day over the trailing window"""
    return await analytics_services.get_temporal_analysis(db, days)


@router.get("/top-voted", response_model=list[IssueResponse])
async def get_top_voted(
    limit: int = Query(settings.TOP_VOTED_LIMIT, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
):
    """Most voted issues"""
    return await analytics_services.get_top_voted_issues(db, limit)


@router.get("/map-issues", response_model=list[MapIssue])
async def get_map_issues(db: AsyncSession = Depends(get_async_session)):
    """Every issue in map-ready form; coordinates may be null"""
    issues = await issue_services.list_issues(db)
    return [analytics_services.to_map_issue(issue) for issue in issues]
