"""
Error taxonomy shared by the service layer, the HTTP handlers and the client.

Every error carries a stable ``code`` that travels in the failure envelope so the
client can rebuild the same exception type on its side.
"""

# Standard library imports
from typing import Any


class CivicPulseError(Exception):
    code: str = "error"
    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None, details: Any | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class UnauthenticatedError(CivicPulseError):
    code = "unauthenticated"
    status_code = 401
    default_message = "You need to be signed in to do that"


class NotFoundError(CivicPulseError):
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class AlreadyVotedError(CivicPulseError):
    code = "already_voted"
    status_code = 409
    default_message = "You have already voted for this issue"


class ValidationFailedError(CivicPulseError):
    code = "validation_error"
    status_code = 400
    default_message = "Invalid request data"


class IssueLockedError(ValidationFailedError):
    """Owner tried to edit or delete an issue that is no longer pending."""

    code = "issue_locked"
    status_code = 409
    default_message = "Issues can only be changed while they are pending"


class BackendError(CivicPulseError):
    code = "backend_error"
    status_code = 502
    default_message = "The service is unavailable. Please try again."


ERRORS_BY_CODE: dict[str, type[CivicPulseError]] = {
    cls.code: cls
    for cls in (
        UnauthenticatedError,
        NotFoundError,
        AlreadyVotedError,
        ValidationFailedError,
        IssueLockedError,
        BackendError,
    )
}


def error_from_code(code: str | None, message: str | None = None, status_code: int | None = None) -> CivicPulseError:
    """Rebuild a typed error from a failure envelope."""
    if code in ERRORS_BY_CODE:
        return ERRORS_BY_CODE[code](message)
    # Generic envelopes produced by HTTPException / validation handlers
    if status_code == 401:
        return UnauthenticatedError(message)
    if status_code == 404:
        return NotFoundError(message)
    if status_code in (400, 422):
        return ValidationFailedError(message)
    return BackendError(message)
