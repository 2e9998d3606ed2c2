"""
Database models package.

Importing this package registers every table on ``Base.metadata``.
"""

# Local application imports
from civicpulse.models.auth import User
from civicpulse.models.base import Base
from civicpulse.models.issues import Issue, IssueCategory, IssueStatus, Vote

__all__ = [
    "Base",
    # Accounts and profiles
    "User",
    # Issue reporting
    "Issue",
    "IssueCategory",
    "IssueStatus",
    "Vote",
]
