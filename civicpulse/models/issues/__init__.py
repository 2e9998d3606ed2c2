# Local application imports
from civicpulse.models.issues.issue import Issue, IssueCategory, IssueStatus
from civicpulse.models.issues.vote import Vote

__all__ = ["Issue", "IssueCategory", "IssueStatus", "Vote"]
