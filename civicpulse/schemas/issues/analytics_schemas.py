# Standard library imports
from datetime import date
from uuid import UUID

# Third-party imports
from pydantic import BaseModel

# Local application imports
from civicpulse.models.issues.issue import IssueCategory, IssueStatus


class CategoryCount(BaseModel):
    category: IssueCategory
    count: int


class DailyCount(BaseModel):
    date: date
    count: int


class MapIssue(BaseModel):
    id: UUID
    title: str
    category: IssueCategory
    status: IssueStatus
    votes: int
    lat: float | None = None
    lng: float | None = None
