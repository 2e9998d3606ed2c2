"""
Pydantic schemas package.

Request/response validation and serialization for the HTTP surface; the client
library reuses the same models to normalize backend records.
"""

# Local application imports
from civicpulse.schemas.auth import ProfileResponse, ProfileUpdateRequest, Token, UserCreateRequest
from civicpulse.schemas.common import BaseResponse, ErrorDetails
from civicpulse.schemas.issues import (
    CategoryCount,
    DailyCount,
    IssueCreate,
    IssueListResponse,
    IssueResponse,
    IssueUpdate,
    LocationOption,
    MapIssue,
    MapViewResponse,
    SortKey,
    VoteStatusResponse,
)

__all__ = [
    # Auth schemas
    "ProfileResponse",
    "ProfileUpdateRequest",
    "Token",
    "UserCreateRequest",
    # Envelope
    "BaseResponse",
    "ErrorDetails",
    # Issue schemas
    "CategoryCount",
    "DailyCount",
    "IssueCreate",
    "IssueListResponse",
    "IssueResponse",
    "IssueUpdate",
    "LocationOption",
    "MapIssue",
    "MapViewResponse",
    "SortKey",
    "VoteStatusResponse",
]
