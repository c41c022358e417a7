"""
Error taxonomy for the users and notes consistency layer.

Every error carries a human readable message and the HTTP status class it
is reported with. None of them is retried; the caller has to change the
input.
"""


class TechnotesError(Exception):
    """Base exception for all technotes request failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"message": self.message}


class InvalidDataError(TechnotesError):
    """Missing or malformed input, or data the store refused to write."""

    status_code = 400


class NotFoundError(TechnotesError):
    """A referenced user or note does not exist (reported as a 400)."""

    status_code = 400


class ConflictError(TechnotesError):
    """Collated duplicate of a username or note title."""

    status_code = 409


class DependencyError(ConflictError):
    """Deletion blocked because notes still reference the user."""


class NoteOwnerNotFoundError(ConflictError):
    """The owner named by a new note does not exist."""
