"""Tests for board contracts: lanes, records and errors."""

import pytest

from shiptivity.contracts import (
    BoardPosition,
    ClientNotFoundError,
    InvalidIdError,
    InvalidLaneError,
    Lane,
    LaneViolation,
    MoveRequest,
    ReorderError,
    StoreCommitFailedError,
)
from shiptivity.contracts.enums import LANE_TAGS


class TestLane:
    def test_tags_are_wire_values(self) -> None:
        assert LANE_TAGS == ("backlog", "in-progress", "complete")

    def test_lane_from_tag(self) -> None:
        assert Lane("in-progress") is Lane.IN_PROGRESS


class TestRecords:
    def test_move_request_defaults_to_empty(self) -> None:
        assert MoveRequest(client_id=1).is_empty
        assert not MoveRequest(client_id=1, priority=2).is_empty

    def test_move_request_rejects_string_lane(self) -> None:
        with pytest.raises(TypeError, match="lane must be Lane"):
            MoveRequest(client_id=1, lane="backlog")  # type: ignore[arg-type]

    def test_move_request_rejects_zero_priority(self) -> None:
        with pytest.raises(ValueError):
            MoveRequest(client_id=1, priority=0)

    def test_board_position_is_hashable_value(self) -> None:
        assert BoardPosition(Lane.BACKLOG, 2) == BoardPosition(Lane.BACKLOG, 2)
        assert len({BoardPosition(Lane.BACKLOG, 2), BoardPosition(Lane.BACKLOG, 2)}) == 1

    def test_lane_violation_describe(self) -> None:
        violation = LaneViolation(Lane.COMPLETE, 2, duplicates=(), missing=(2,), out_of_range=(5,))

        assert violation.describe() == "complete (2 clients): missing [2], out of range [5]"


class TestErrors:
    def test_input_error_body(self) -> None:
        error = InvalidLaneError("Status can only be one of the following: [backlog | in-progress | complete].")

        assert error.to_body()["message"] == "Invalid status provided."
        assert str(error).startswith("Invalid status provided. Status can only be")

    def test_input_errors_are_distinct_from_store_errors(self) -> None:
        assert not issubclass(InvalidIdError, ReorderError)
        assert issubclass(StoreCommitFailedError, ReorderError)
        assert issubclass(ClientNotFoundError, ReorderError)

    def test_commit_failed_message(self) -> None:
        assert str(StoreCommitFailedError("disk full", client_id=7)) == "Commit failed for client 7: disk full"
        assert str(StoreCommitFailedError("disk full")) == "Commit failed for board: disk full"
