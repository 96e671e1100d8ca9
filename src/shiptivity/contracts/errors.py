"""Error taxonomy for the board.

Two families:

- BoardInputError: caller supplied something we cannot act on. Raised by the
  validator before any write is attempted. Carries the short ``message`` and
  the ``long_message`` shown to API consumers. Never retried.
- ReorderError: the store could not apply a move. Infrastructure failure,
  surfaced to the caller; retry policy belongs to the caller.
"""

from typing import TypedDict


class ErrorBody(TypedDict):
    """Schema for error payloads returned by the HTTP API."""

    message: str
    long_message: str


# =============================================================================
# Caller input errors
# =============================================================================


class BoardInputError(Exception):
    """Base class for rejected caller input."""

    message: str = "Invalid input provided."

    def __init__(self, long_message: str) -> None:
        self.long_message = long_message
        super().__init__(f"{self.message} {long_message}")

    def to_body(self) -> ErrorBody:
        return {"message": self.message, "long_message": self.long_message}


class InvalidIdError(BoardInputError):
    """Client id is malformed or does not exist."""

    message = "Invalid id provided."


class InvalidLaneError(BoardInputError):
    """Lane (status) tag is not one of the recognized values."""

    message = "Invalid status provided."


class InvalidPriorityError(BoardInputError):
    """Priority is not an integer or is below 1."""

    message = "Invalid priority provided."


class InvalidRequestError(BoardInputError):
    """Request body is not a JSON object."""

    message = "Invalid request provided."


# =============================================================================
# Store / engine errors
# =============================================================================


class ReorderError(Exception):
    """Base class for failures while applying a move."""


class StoreCommitFailedError(ReorderError):
    """The atomic unit could not be applied; nothing was written.

    Attributes:
        client_id: Client whose move failed (None for bulk operations)
        reason: Description of the underlying store failure
    """

    def __init__(self, reason: str, *, client_id: int | None = None) -> None:
        self.client_id = client_id
        self.reason = reason
        target = f"client {client_id}" if client_id is not None else "board"
        super().__init__(f"Commit failed for {target}: {reason}")


class ClientNotFoundError(ReorderError):
    """Client disappeared between validation and the move."""

    def __init__(self, client_id: int) -> None:
        self.client_id = client_id
        super().__init__(f"Client {client_id} does not exist")


class SchemaCompatibilityError(Exception):
    """Raised when the clients table is incompatible with current code."""

    pass
