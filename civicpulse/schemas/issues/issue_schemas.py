# Standard library imports
from datetime import datetime
from enum import Enum
from uuid import UUID

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field, model_validator

# Local application imports
from civicpulse.models.issues.issue import IssueCategory, IssueStatus


class SortKey(str, Enum):
    NEWEST = "newest"
    VOTES = "votes"
    LOCATION = "location"


class IssueCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=100)
    description: str = Field(..., min_length=20, max_length=1000)
    category: IssueCategory
    location: str = Field(..., min_length=5, max_length=200)
    # Accepted for form compatibility; new issues always start as pending
    status: IssueStatus | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    image_url: str | None = None

    @model_validator(mode="after")
    def check_coordinates_pair(self) -> "IssueCreate":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Latitude and longitude must be provided together")
        return self


class IssueUpdate(BaseModel):
    title: str | None = Field(None, min_length=5, max_length=100)
    description: str | None = Field(None, min_length=20, max_length=1000)
    category: IssueCategory | None = None
    location: str | None = Field(None, min_length=5, max_length=200)
    status: IssueStatus | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    # Explicit null removes the current photo
    image_url: str | None = None


class IssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    category: IssueCategory
    status: IssueStatus
    location: str
    latitude: float | None = None
    longitude: float | None = None
    image_url: str | None = None
    user_id: UUID
    votes: int
    created_at: datetime
    updated_at: datetime

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def is_editable(self) -> bool:
        """Owners may edit or delete only while the issue is pending."""
        return self.status == IssueStatus.PENDING


class IssueListResponse(BaseModel):
    issues: list[IssueResponse]
    total: int
    page: int
    per_page: int
    total_pages: int


class ImageUploadResponse(BaseModel):
    url: str
