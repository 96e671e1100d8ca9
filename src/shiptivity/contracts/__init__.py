"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core/engine.
Settings classes live in shiptivity.core.config.

Import patterns:
    from shiptivity.contracts import Lane, Client, InvalidLaneError
"""

from shiptivity.contracts.enums import LANE_TAGS, Lane
from shiptivity.contracts.errors import (
    BoardInputError,
    ClientNotFoundError,
    ErrorBody,
    InvalidIdError,
    InvalidLaneError,
    InvalidPriorityError,
    InvalidRequestError,
    ReorderError,
    SchemaCompatibilityError,
    StoreCommitFailedError,
)
from shiptivity.contracts.records import (
    BoardPosition,
    Client,
    LaneViolation,
    MoveOutcome,
    MoveRequest,
)

__all__ = [
    "LANE_TAGS",
    "BoardInputError",
    "BoardPosition",
    "Client",
    "ClientNotFoundError",
    "ErrorBody",
    "InvalidIdError",
    "InvalidLaneError",
    "InvalidPriorityError",
    "InvalidRequestError",
    "Lane",
    "LaneViolation",
    "MoveOutcome",
    "MoveRequest",
    "ReorderError",
    "SchemaCompatibilityError",
    "StoreCommitFailedError",
]
