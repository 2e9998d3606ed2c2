# Standard library imports
from uuid import UUID

# Third-party imports
from pydantic import BaseModel

# Local application imports
from civicpulse.models.issues.issue import IssueCategory, IssueStatus


class LatLng(BaseModel):
    lat: float
    lng: float


class Bounds(BaseModel):
    south_west: LatLng
    north_east: LatLng

    def contains(self, point: LatLng) -> bool:
        return (
            self.south_west.lat <= point.lat <= self.north_east.lat
            and self.south_west.lng <= point.lng <= self.north_east.lng
        )


class Viewport(BaseModel):
    center: LatLng
    zoom: float
    bounds: Bounds | None = None
    padding: int = 0


class MapMarker(BaseModel):
    issue_id: UUID
    title: str
    category: IssueCategory
    status: IssueStatus
    votes: int
    position: LatLng
    # False when the issue has no coordinates and sits at the fallback position
    has_coordinates: bool
    color: str
    icon: str
    selected: bool = False


class MapViewResponse(BaseModel):
    markers: list[MapMarker]
    selected_issue_id: UUID | None = None
    viewport: Viewport
