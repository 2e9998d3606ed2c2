"""
Optimistic voting with rollback.

Each issue id has its own small state machine:

    IDLE --cast--> PENDING --ok--> COMMITTED
                      |
                      +--error--> ROLLED_BACK --cast--> PENDING ...

The control is disabled while PENDING or COMMITTED. The backend's unique
(issue, user) constraint stays the source of truth; this class only keeps the
UI honest about it.
"""

# Standard library imports
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
import enum
from uuid import UUID

# Local application imports
from civicpulse.core.exceptions import AlreadyVotedError, CivicPulseError
from civicpulse.core.monitoring.logging import get_contextual_logger
from civicpulse.schemas.issues.issue_schemas import IssueResponse

MILESTONE_EVERY = 10


class VoteState(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class VoteEntry:
    issue_id: UUID
    votes: int
    state: VoteState = VoteState.IDLE
    error: str | None = None

    @property
    def has_voted(self) -> bool:
        return self.state == VoteState.COMMITTED

    @property
    def enabled(self) -> bool:
        return self.state in (VoteState.IDLE, VoteState.ROLLED_BACK)

    @property
    def is_milestone(self) -> bool:
        return self.has_voted and self.votes > 0 and self.votes % MILESTONE_EVERY == 0


CastVote = Callable[[UUID], Awaitable[IssueResponse]]
EntryCallback = Callable[[VoteEntry], None]


class VoteCoordinator:
    def __init__(self, cast_vote: CastVote, on_committed: EntryCallback | None = None):
        self._cast_vote = cast_vote
        self._on_committed = on_committed
        self._entries: dict[UUID, VoteEntry] = {}

    def prime(self, issue_id: UUID, votes: int, has_voted: bool = False) -> VoteEntry:
        """Seed the entry from the backend's vote count and has-voted flag."""
        entry = VoteEntry(issue_id=issue_id, votes=votes, state=VoteState.COMMITTED if has_voted else VoteState.IDLE)
        self._entries[issue_id] = entry
        return entry

    def entry(self, issue_id: UUID, votes: int = 0) -> VoteEntry:
        return self._entries.get(issue_id) or self.prime(issue_id, votes)

    def sync(self, issue_id: UUID, votes: int) -> VoteEntry:
        """Take the backend's count for a refreshed issue, keeping the vote state."""
        current = self._entries.get(issue_id)
        if current is None:
            return self.prime(issue_id, votes)
        if current.state == VoteState.PENDING:
            return current
        updated = replace(current, votes=votes)
        self._entries[issue_id] = updated
        return updated

    async def cast(self, issue_id: UUID, votes: int | None = None) -> VoteEntry:
        """
        Cast a vote, showing the increment immediately.

        A second cast while the first is in flight is ignored. On failure the
        increment is undone and the error re-raised for the caller to report;
        ``AlreadyVotedError`` leaves the entry marked as voted.
        """
        log = get_contextual_logger(__name__, issue_id=issue_id)
        current = self.entry(issue_id, votes or 0)

        if current.state == VoteState.PENDING:
            log.debug("Vote already in flight; ignoring duplicate cast")
            return current
        if current.state == VoteState.COMMITTED:
            raise AlreadyVotedError()

        self._entries[issue_id] = replace(current, votes=current.votes + 1, state=VoteState.PENDING, error=None)

        try:
            issue = await self._cast_vote(issue_id)
        except AlreadyVotedError as e:
            self._entries[issue_id] = replace(current, state=VoteState.COMMITTED, error=e.message)
            log.info("Backend reports an existing vote")
            raise
        except CivicPulseError as e:
            self._entries[issue_id] = replace(current, state=VoteState.ROLLED_BACK, error=e.message)
            log.error(f"Error voting: {e.message}")
            raise
        except Exception as e:
            self._entries[issue_id] = replace(current, state=VoteState.ROLLED_BACK, error=str(e))
            log.error(f"Unexpected error voting: {e}")
            raise

        committed = VoteEntry(issue_id=issue_id, votes=issue.votes, state=VoteState.COMMITTED)
        self._entries[issue_id] = committed
        if self._on_committed is not None:
            self._on_committed(committed)
        return committed
