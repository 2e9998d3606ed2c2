"""
Filter/sort/search engine for issue collections.

The pipeline is pure: the same collection and criteria always give the same
ordered output. Stages run in a fixed order (category, status, search, sort);
the keep-stages only narrow and the final sort is stable.
"""

# Standard library imports
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

# Local application imports
from civicpulse.models.issues.issue import IssueCategory, IssueStatus
from civicpulse.schemas.issues.issue_schemas import SortKey

if TYPE_CHECKING:
    # Local application imports
    from civicpulse.schemas.issues.issue_schemas import IssueResponse

ALL = "all"


@dataclass(frozen=True)
class IssueCriteria:
    """Criteria for the browse view; ``None`` for category/status means "all"."""

    category: IssueCategory | None = None
    status: IssueStatus | None = None
    search: str = ""
    sort: SortKey = SortKey.NEWEST

    @classmethod
    def from_params(
        cls,
        category: str | None = None,
        status: str | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> "IssueCriteria":
        """
        Build criteria from raw query values, treating empty values and "all" as no filter.

        Raises:
            ValueError: if a value is outside its closed set
        """
        return cls(
            category=None if not category or category == ALL else IssueCategory(category),
            status=None if not status or status == ALL else IssueStatus(status),
            search=search or "",
            sort=SortKey(sort) if sort else SortKey.NEWEST,
        )

    @property
    def is_default(self) -> bool:
        return self == IssueCriteria()

    @property
    def active_filter_count(self) -> int:
        return sum(
            (
                self.category is not None,
                self.status is not None,
                bool(self.search),
                self.sort != SortKey.NEWEST,
            )
        )


def matches_category(issue: "IssueResponse", category: IssueCategory | None) -> bool:
    return category is None or issue.category == category


def matches_status(issue: "IssueResponse", status: IssueStatus | None) -> bool:
    return status is None or issue.status == status


def matches_search(issue: "IssueResponse", search: str) -> bool:
    """Case-insensitive substring match on title, description or location."""
    needle = search.casefold()
    if not needle:
        return True
    return any(needle in (field or "").casefold() for field in (issue.title, issue.description, issue.location))


def _sort_spec(sort: SortKey) -> tuple[Callable[["IssueResponse"], Any], bool]:
    if sort == SortKey.NEWEST:
        return (lambda issue: issue.created_at), True
    if sort == SortKey.VOTES:
        return (lambda issue: issue.votes), True
    if sort == SortKey.LOCATION:
        return (lambda issue: (issue.location or "").casefold()), False
    raise ValueError(f"Unsupported sort key: {sort!r}")


def sort_issues(issues: Iterable["IssueResponse"], sort: SortKey) -> list["IssueResponse"]:
    # sorted() stays stable with reverse=True, so ties keep their prior order
    key, descending = _sort_spec(sort)
    return sorted(issues, key=key, reverse=descending)


def filter_issues(issues: Sequence["IssueResponse"], criteria: IssueCriteria) -> list["IssueResponse"]:
    """
    Reduce ``issues`` to the filtered, sorted view described by ``criteria``.

    Returns a new list; the input sequence is never modified.
    """
    result = [issue for issue in issues if matches_category(issue, criteria.category)]
    result = [issue for issue in result if matches_status(issue, criteria.status)]
    result = [issue for issue in result if matches_search(issue, criteria.search)]
    return sort_issues(result, criteria.sort)
