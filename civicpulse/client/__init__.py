# Local application imports
from civicpulse.client.api_client import CivicPulseClient
from civicpulse.client.board import BoardFilters, IssueBoard
from civicpulse.client.location_search import LocationSearch
from civicpulse.client.vote_coordinator import VoteCoordinator, VoteEntry, VoteState

__all__ = [
    "BoardFilters",
    "CivicPulseClient",
    "IssueBoard",
    "LocationSearch",
    "VoteCoordinator",
    "VoteEntry",
    "VoteState",
]
