"""Error kinds raised by the draft engine and its storage layer."""

from __future__ import annotations


class DraftError(Exception):
    """Base class for every rejection the engine can report."""

    kind = "internal"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(DraftError):
    kind = "unauthenticated"


class NotFoundError(DraftError):
    kind = "not_found"


class ForbiddenError(DraftError):
    kind = "forbidden"


class InvalidStateError(DraftError):
    """Operation needs a different game status; refresh and re-check."""

    kind = "invalid_state"
    retryable = True


class ConflictError(DraftError):
    """Mutation would break a game invariant, or lost a concurrent race."""

    kind = "conflict"
    retryable = True


class StorageError(DraftError):
    kind = "internal"
