"""Board record contracts for the clients table.

These are strict contracts - lane fields use the Lane enum.
Repository layer handles string->enum conversion for DB reads.

The clients table is OUR data. If we read garbage from it, something
catastrophic happened - crash immediately rather than coerce.
"""

from dataclasses import dataclass
from typing import Any

from shiptivity.contracts.enums import Lane


def _validate_enum(value: object, enum_type: type, field_name: str) -> None:
    """Validate that value is an instance of the expected enum type."""
    if value is not None and not isinstance(value, enum_type):
        raise TypeError(f"{field_name} must be {enum_type.__name__}, got {type(value).__name__}: {value!r}")


@dataclass(frozen=True, slots=True)
class Client:
    """A client card on the board.

    Strict contract - status must be a Lane enum and priority must be >= 1.
    ``name`` and ``description`` are opaque to reordering.
    """

    id: int
    status: Lane  # Strict: enum only
    priority: int
    name: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        _validate_enum(self.status, Lane, "status")
        if self.priority < 1:
            raise ValueError(f"Client {self.id} has priority {self.priority}; priorities start at 1")

    def to_dict(self) -> dict[str, Any]:
        """Wire shape used by the HTTP API and the CLI JSON output."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority,
        }


@dataclass(frozen=True, slots=True)
class BoardPosition:
    """A (lane, priority) slot on the board."""

    lane: Lane
    priority: int

    def __post_init__(self) -> None:
        _validate_enum(self.lane, Lane, "lane")


@dataclass(frozen=True, slots=True)
class MoveRequest:
    """A validated request to move a client.

    ``lane`` / ``priority`` of None mean "keep the current value".
    """

    client_id: int
    lane: Lane | None = None
    priority: int | None = None

    def __post_init__(self) -> None:
        _validate_enum(self.lane, Lane, "lane")
        if self.priority is not None and self.priority < 1:
            raise ValueError(f"priority must be >= 1, got {self.priority}")

    @property
    def is_empty(self) -> bool:
        """True when neither lane nor priority was requested."""
        return self.lane is None and self.priority is None


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """Result of a committed move.

    Attributes:
        client_id: The moved client.
        source: Position before the move.
        target: Position after the move (after clamping).
        changed: False when the move resolved to a no-op.
        clamped: True when the requested priority was beyond the lane end.
        rows_affected: Total rows written by the commit (0 for a no-op).
    """

    client_id: int
    source: BoardPosition
    target: BoardPosition
    changed: bool
    clamped: bool = False
    rows_affected: int = 0


@dataclass(frozen=True, slots=True)
class LaneViolation:
    """A lane whose priorities are not exactly 1..N."""

    lane: Lane
    count: int
    duplicates: tuple[int, ...]
    missing: tuple[int, ...]
    out_of_range: tuple[int, ...]

    def describe(self) -> str:
        parts = []
        if self.duplicates:
            parts.append(f"duplicates {list(self.duplicates)}")
        if self.missing:
            parts.append(f"missing {list(self.missing)}")
        if self.out_of_range:
            parts.append(f"out of range {list(self.out_of_range)}")
        return f"{self.lane.value} ({self.count} clients): " + ", ".join(parts)
