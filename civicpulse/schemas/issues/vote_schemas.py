# Standard library imports
from uuid import UUID

# Third-party imports
from pydantic import BaseModel


class VoteStatusResponse(BaseModel):
    issue_id: UUID
    has_voted: bool
