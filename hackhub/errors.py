"""Error taxonomy shared by the submission flows and the data-access layer."""

from __future__ import annotations


class HackHubError(Exception):
    """Base class for errors surfaced to the user as a flash message."""

    title = "Error"

    def __init__(self, message: str, title: str | None = None):
        super().__init__(message)
        self.message = message
        if title is not None:
            self.title = title


class ValidationError(HackHubError):
    """Raised before any data-access call when input is rejected."""


class LockedOutError(ValidationError):
    """Too many failed sign-in attempts in this session."""

    title = "Account Locked"

    def __init__(self, remaining_minutes: int):
        super().__init__(
            f"Too many failed attempts. Please try again in {remaining_minutes} minutes."
        )
        self.remaining_minutes = remaining_minutes


class AuthError(HackHubError):
    """Credentials were rejected, or the action needs a signed-in profile."""


class DeadlinePassedError(HackHubError):
    title = "Deadline passed"


class SelectionLockedError(HackHubError):
    title = "Selection locked"


class DataAccessError(HackHubError):
    """The storage collaborator failed a read or write."""


class NotFoundError(DataAccessError):
    pass


class ConstraintError(DataAccessError):
    pass


class AlreadySubmittedError(ConstraintError):
    title = "Already submitted"


class UploadError(DataAccessError):
    pass


__all__ = [
    "HackHubError",
    "ValidationError",
    "LockedOutError",
    "AuthError",
    "DeadlinePassedError",
    "SelectionLockedError",
    "DataAccessError",
    "NotFoundError",
    "ConstraintError",
    "AlreadySubmittedError",
    "UploadError",
]
