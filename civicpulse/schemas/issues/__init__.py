from .analytics_schemas import CategoryCount, DailyCount, MapIssue
from .issue_schemas import (
    ImageUploadResponse,
    IssueCreate,
    IssueListResponse,
    IssueResponse,
    IssueUpdate,
    SortKey,
)
from .location_schemas import LocationOption
from .map_schemas import Bounds, LatLng, MapMarker, MapViewResponse, Viewport
from .vote_schemas import VoteStatusResponse

__all__ = [
    "IssueCreate",
    "IssueUpdate",
    "IssueResponse",
    "IssueListResponse",
    "ImageUploadResponse",
    "SortKey",
    "VoteStatusResponse",
    "CategoryCount",
    "DailyCount",
    "MapIssue",
    "LocationOption",
    "LatLng",
    "Bounds",
    "Viewport",
    "MapMarker",
    "MapViewResponse",
]
