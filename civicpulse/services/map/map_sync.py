"""
Map synchronization layer.

Projects the issue collection onto markers using the map's own filter state
(category set, status set, title search) and keeps selection and viewport in
step with it. The only coupling to the list view is the shared "selected
category": see ``toggle_category`` and ``sync_external_category``.
"""

# Standard library imports
from collections.abc import Callable, Iterable, Sequence
import math
from uuid import UUID

# Local application imports
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.models.issues.issue import IssueCategory, IssueStatus
from civicpulse.schemas.issues.issue_schemas import IssueResponse
from civicpulse.schemas.issues.map_schemas import Bounds, LatLng, MapMarker, Viewport

logger = get_logger(__name__)

CATEGORY_STYLES: dict[IssueCategory, tuple[str, str]] = {
    IssueCategory.ROAD: ("#F59E0B", "R"),
    IssueCategory.WATER: ("#2563EB", "W"),
    IssueCategory.SANITATION: ("#22C55E", "S"),
    IssueCategory.ELECTRICITY: ("#FACC15", "E"),
    IssueCategory.OTHER: ("#6B7280", "O"),
}

DEFAULT_CATEGORIES: frozenset[IssueCategory] = frozenset(IssueCategory)
DEFAULT_STATUSES: frozenset[IssueStatus] = frozenset({IssueStatus.PENDING, IssueStatus.IN_PROGRESS})

DEFAULT_VIEWPORT = Viewport(center=LatLng(lat=20, lng=0), zoom=1.5)
FALLBACK_POSITION = LatLng(lat=40.7128, lng=-74.006)

SELECT_ZOOM = 14
FIT_PADDING = 60
FIT_MAX_ZOOM = 12
TILE_SIZE = 256
MAX_MERCATOR_LAT = 85.0511

CategoryCallback = Callable[[IssueCategory | None], None]


def marker_style(category: IssueCategory) -> tuple[str, str]:
    """(colour, icon letter) for a category; unknown values are an error, not grey."""
    try:
        return CATEGORY_STYLES[IssueCategory(category)]
    except (KeyError, ValueError) as e:
        raise ValueError(f"No marker style for category {category!r}") from e


def compute_bounds(points: Iterable[LatLng]) -> Bounds | None:
    points = list(points)
    if not points:
        return None
    return Bounds(
        south_west=LatLng(lat=min(p.lat for p in points), lng=min(p.lng for p in points)),
        north_east=LatLng(lat=max(p.lat for p in points), lng=max(p.lng for p in points)),
    )


def _mercator_y(lat: float) -> float:
    lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, lat))
    sin_lat = math.sin(math.radians(lat))
    return math.log((1 + sin_lat) / (1 - sin_lat)) / 2


def fit_viewport(bounds: Bounds, width: int, height: int, padding: int = FIT_PADDING, max_zoom: float = FIT_MAX_ZOOM) -> Viewport:
    """Viewport centred on ``bounds`` at the largest zoom that shows all of it, capped at ``max_zoom``."""
    usable_width = max(width - 2 * padding, 1)
    usable_height = max(height - 2 * padding, 1)

    lng_fraction = (bounds.north_east.lng - bounds.south_west.lng) / 360
    lat_fraction = (_mercator_y(bounds.north_east.lat) - _mercator_y(bounds.south_west.lat)) / (2 * math.pi)

    zoom = float(max_zoom)
    if lng_fraction > 0:
        zoom = min(zoom, math.log2(usable_width / TILE_SIZE / lng_fraction))
    if lat_fraction > 0:
        zoom = min(zoom, math.log2(usable_height / TILE_SIZE / lat_fraction))

    center = LatLng(
        lat=(bounds.south_west.lat + bounds.north_east.lat) / 2,
        lng=(bounds.south_west.lng + bounds.north_east.lng) / 2,
    )
    return Viewport(center=center, zoom=max(zoom, 0.0), bounds=bounds, padding=padding)


class MapSynchronizer:
    def __init__(
        self,
        issues: Sequence[IssueResponse] = (),
        *,
        on_category_selected: CategoryCallback | None = None,
        viewport: Viewport | None = None,
        map_size: tuple[int, int] = (800, 600),
        padding: int = FIT_PADDING,
        max_zoom: float = FIT_MAX_ZOOM,
        fallback_position: LatLng = FALLBACK_POSITION,
    ):
        self.issues: tuple[IssueResponse, ...] = tuple(issues)
        self.categories: set[IssueCategory] = set(DEFAULT_CATEGORIES)
        self.statuses: set[IssueStatus] = set(DEFAULT_STATUSES)
        self.search: str = ""
        self.selected_issue_id: UUID | None = None
        self.viewport: Viewport = viewport or DEFAULT_VIEWPORT.model_copy()
        self.on_category_selected = on_category_selected
        self.map_size = map_size
        self.padding = padding
        self.max_zoom = max_zoom
        self.fallback_position = fallback_position
        self.fit_to_visible()

    # ----- projection -----

    def is_visible(self, issue: IssueResponse) -> bool:
        needle = self.search.casefold()
        matches_search = not needle or needle in issue.title.casefold()
        return matches_search and issue.category in self.categories and issue.status in self.statuses

    def visible_issues(self) -> list[IssueResponse]:
        return [issue for issue in self.issues if self.is_visible(issue)]

    def to_marker(self, issue: IssueResponse) -> MapMarker:
        color, icon = marker_style(issue.category)
        if issue.has_coordinates:
            position = LatLng(lat=issue.latitude, lng=issue.longitude)
        else:
            position = self.fallback_position
        return MapMarker(
            issue_id=issue.id,
            title=issue.title,
            category=issue.category,
            status=issue.status,
            votes=issue.votes,
            position=position,
            has_coordinates=issue.has_coordinates,
            color=color,
            icon=icon,
            selected=issue.id == self.selected_issue_id,
        )

    def visible_markers(self) -> list[MapMarker]:
        return [self.to_marker(issue) for issue in self.visible_issues()]

    @property
    def selected_issue(self) -> IssueResponse | None:
        if self.selected_issue_id is None:
            return None
        return next((issue for issue in self.issues if issue.id == self.selected_issue_id), None)

    # ----- viewport -----

    def fit_to_visible(self) -> Viewport:
        """
        Reframe on the visible markers when there are two or more of them.

        A single visible marker leaves the viewport where it is; markers without
        coordinates never take part in the bounds.
        """
        visible = self.visible_issues()
        if len(visible) < 2:
            return self.viewport

        bounds = compute_bounds(
            LatLng(lat=issue.latitude, lng=issue.longitude) for issue in visible if issue.has_coordinates
        )
        if bounds is None:
            return self.viewport

        width, height = self.map_size
        self.viewport = fit_viewport(bounds, width, height, padding=self.padding, max_zoom=self.max_zoom)
        return self.viewport

    # ----- state changes -----

    def set_issues(self, issues: Sequence[IssueResponse]) -> None:
        self.issues = tuple(issues)
        if self.selected_issue_id is not None and self.selected_issue is None:
            self.selected_issue_id = None
        self.fit_to_visible()

    def set_search(self, text: str) -> None:
        self.search = text
        self.fit_to_visible()

    def toggle_status(self, status: IssueStatus, checked: bool) -> None:
        status = IssueStatus(status)
        if checked:
            self.statuses.add(status)
        else:
            self.statuses.discard(status)
        self.fit_to_visible()

    def toggle_category(self, category: IssueCategory, checked: bool) -> None:
        """
        Checkbox change on the map. When exactly one category is left checked it
        becomes the shared selection; any other count clears the shared selection.
        """
        category = IssueCategory(category)
        if checked:
            self.categories.add(category)
        else:
            self.categories.discard(category)

        if self.on_category_selected is not None:
            only = next(iter(self.categories)) if len(self.categories) == 1 else None
            self.on_category_selected(only)
        self.fit_to_visible()

    def sync_external_category(self, category: IssueCategory | None) -> None:
        """
        React to the shared selection changing elsewhere (e.g. the category chart).

        A specific category collapses the map filter to that category. Clearing the
        selection restores every category, but only when exactly one is checked, so
        a hand-picked multi-category filter survives.
        """
        if category is not None:
            self.categories = {IssueCategory(category)}
        elif len(self.categories) == 1:
            self.categories = set(DEFAULT_CATEGORIES)
        else:
            return
        self.fit_to_visible()

    def reset_filters(self) -> None:
        self.categories = set(DEFAULT_CATEGORIES)
        self.statuses = set(DEFAULT_STATUSES)
        self.search = ""
        if self.on_category_selected is not None:
            self.on_category_selected(None)
        self.fit_to_visible()

    def select_issue(self, issue_id: UUID) -> IssueResponse | None:
        """Select an issue (marker click or list click) and fly to it when it has coordinates."""
        issue = next((candidate for candidate in self.issues if candidate.id == issue_id), None)
        if issue is None:
            logger.debug(f"Ignoring selection of unknown issue {issue_id}")
            return None

        self.selected_issue_id = issue.id
        if issue.has_coordinates:
            self.viewport = Viewport(
                center=LatLng(lat=issue.latitude, lng=issue.longitude),
                zoom=SELECT_ZOOM,
                padding=self.padding,
            )
        return issue

    def clear_selection(self) -> None:
        """Click on empty map area."""
        self.selected_issue_id = None
