# Standard library imports
from uuid import UUID

# Third-party imports
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.db import get_async_session
from civicpulse.models.issues.issue import IssueCategory, IssueStatus
from civicpulse.schemas.issues.map_schemas import MapViewResponse
from civicpulse.services.issues import issue_services
from civicpulse.services.map.map_sync import DEFAULT_STATUSES, MapSynchronizer

router = APIRouter(prefix="/map", tags=["Map"])


@router.get("/view", response_model=MapViewResponse)
async def get_map_view(
    categories: list[IssueCategory] | None = Query(None),
    statuses: list[IssueStatus] | None = Query(None),
    search: str = Query("", max_length=200),
    selected_category: IssueCategory | None = None,
    selected_issue_id: UUID | None = None,
    width: int = Query(800, ge=100, le=4096),
    height: int = Query(600, ge=100, le=4096),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Markers and viewport for the map, using the map's own filters.

    Omitted ``categories``/``statuses`` fall back to the map defaults; a
    ``selected_category`` collapses the category filter to that category.
    """
    issues = await issue_services.list_issues(db)
    sync = MapSynchronizer(issues, map_size=(width, height))

    if categories is not None:
        sync.categories = set(categories)
    sync.statuses = set(statuses) if statuses is not None else set(DEFAULT_STATUSES)
    sync.search = search
    if selected_category is not None:
        sync.sync_external_category(selected_category)
    sync.fit_to_visible()

    if selected_issue_id is not None:
        sync.select_issue(selected_issue_id)

    return MapViewResponse(
        markers=sync.visible_markers(),
        selected_issue_id=sync.selected_issue_id,
        viewport=sync.viewport,
    )
