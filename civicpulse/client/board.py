"""
Page-level controller for browsing issues.

Owns the issue collection and the one ``BoardFilters`` object that both the
list and the map read. The collection is replaced, never mutated in place.
"""

# Standard library imports
from dataclasses import dataclass
from uuid import UUID

# Local application imports
from civicpulse.client.api_client import CivicPulseClient
from civicpulse.client.vote_coordinator import EntryCallback, VoteCoordinator, VoteEntry
from civicpulse.core.exceptions import CivicPulseError
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.models.issues.issue import IssueCategory, IssueStatus
from civicpulse.schemas.issues.issue_schemas import IssueResponse, SortKey
from civicpulse.services.issues.filter_services import IssueCriteria, filter_issues
from civicpulse.services.issues.pagination_services import Page, paginate
from civicpulse.services.map.map_sync import MapSynchronizer
from civicpulse.settings import settings

logger = get_logger(__name__)


@dataclass
class BoardFilters:
    category: IssueCategory | None = None
    status: IssueStatus | None = None
    search: str = ""
    sort: SortKey = SortKey.NEWEST
    page: int = 1

    @property
    def criteria(self) -> IssueCriteria:
        return IssueCriteria(category=self.category, status=self.status, search=self.search, sort=self.sort)

    def reset(self) -> None:
        self.category = None
        self.status = None
        self.search = ""
        self.sort = SortKey.NEWEST
        self.page = 1


class IssueBoard:
    def __init__(
        self,
        client: CivicPulseClient,
        page_size: int | None = None,
        on_vote_committed: EntryCallback | None = None,
    ):
        self.client = client
        self.page_size = page_size or settings.ISSUES_PAGE_SIZE
        self.filters = BoardFilters()
        self.issues: tuple[IssueResponse, ...] = ()
        self.load_error: str | None = None
        self.viewer_id: UUID | None = None
        self.map = MapSynchronizer(on_category_selected=self._on_map_category_selected)
        self.votes = VoteCoordinator(client.cast_vote, on_committed=on_vote_committed)

    # ----- loading -----

    async def refresh(self) -> tuple[IssueResponse, ...]:
        """
        Reload the collection. On failure the previous collection stays and
        ``load_error`` is set so the page can offer a retry.
        """
        try:
            issues = await self.client.list_issues()
        except CivicPulseError as e:
            logger.error(f"Error fetching issues: {e.message}")
            self.load_error = e.message
            raise

        self.load_error = None
        self._replace(issues)
        for issue in self.issues:
            self.votes.sync(issue.id, issue.votes)
        return self.issues

    async def load_vote_states(self) -> None:
        """Seed the vote coordinator with the viewer's has-voted flags."""
        for issue in self.issues:
            voted = await self.client.has_voted(issue.id)
            self.votes.prime(issue.id, issue.votes, has_voted=voted)

    async def load_viewer(self) -> UUID | None:
        self.viewer_id = (await self.client.me()).id if self.client.is_authenticated else None
        return self.viewer_id

    def can_modify(self, issue: IssueResponse) -> bool:
        """Edit/delete controls: owner only, and only while pending. The API enforces the same rule."""
        return self.viewer_id is not None and issue.user_id == self.viewer_id and issue.is_editable

    def _replace(self, issues) -> None:
        self.issues = tuple(issues)
        self.map.set_issues(self.issues)

    # ----- list view -----

    def filtered(self) -> list[IssueResponse]:
        return filter_issues(self.issues, self.filters.criteria)

    def view(self) -> Page[IssueResponse]:
        """Current page; the stored page number is clamped to what exists."""
        page = paginate(self.filtered(), self.page_size, self.filters.page)
        self.filters.page = page.page
        return page

    def go_to_page(self, page: int) -> Page[IssueResponse]:
        self.filters.page = page
        return self.view()

    def set_search(self, text: str) -> None:
        self.filters.search = text
        self.filters.page = 1

    def set_status(self, status: IssueStatus | None) -> None:
        self.filters.status = status
        self.filters.page = 1

    def set_sort(self, sort: SortKey) -> None:
        self.filters.sort = sort

    def select_category(self, category: IssueCategory | None) -> None:
        """Shared category selection (list filter, chart click); mirrored onto the map."""
        self.filters.category = category
        self.filters.page = 1
        self.map.sync_external_category(category)

    def _on_map_category_selected(self, category: IssueCategory | None) -> None:
        if category != self.filters.category:
            self.select_category(category)

    def reset_filters(self) -> None:
        self.filters.reset()
        self.map.reset_filters()

    # ----- mutations -----

    def _with_issue(self, updated: IssueResponse) -> None:
        self._replace(updated if issue.id == updated.id else issue for issue in self.issues)

    async def vote(self, issue_id: UUID) -> VoteEntry:
        current = next((issue for issue in self.issues if issue.id == issue_id), None)
        entry = await self.votes.cast(issue_id, current.votes if current else None)
        if current is not None and entry.has_voted:
            self._with_issue(current.model_copy(update={"votes": entry.votes}))
        return entry

    async def delete(self, issue_id: UUID) -> None:
        await self.client.delete_issue(issue_id)
        self._replace(issue for issue in self.issues if issue.id != issue_id)
        self.view()
