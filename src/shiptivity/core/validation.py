"""Input validation for board operations.

All checks run before any mutation is attempted, so a rejected request
never leaves a partial write behind. Apart from the id existence check
(one point read) these are pure functions.

Raw values arrive from JSON bodies, query strings, path segments and CLI
arguments, so they may be str, int, or anything else JSON can carry.
"""

import re
from collections.abc import Mapping
from typing import Any

from shiptivity.contracts.enums import LANE_TAGS, Lane
from shiptivity.contracts.errors import (
    InvalidIdError,
    InvalidLaneError,
    InvalidPriorityError,
    InvalidRequestError,
)
from shiptivity.contracts.records import MoveRequest
from shiptivity.core.store.database import BoardDB
from shiptivity.core.store.queries import BoardQueries

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

LANE_HINT = "Status can only be one of the following: [" + " | ".join(LANE_TAGS) + "]."


def parse_integer(raw: object) -> int | None:
    """Parse a well-formed integer, or return None.

    Accepts real ints (not bools) and strings of optional sign plus ASCII
    digits, with surrounding whitespace. Everything else is malformed,
    including digit strings too long for int() to convert.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if _INTEGER_PATTERN.fullmatch(text):
            try:
                return int(text)
            except ValueError:
                # Beyond sys.get_int_max_str_digits()
                return None
    return None


def validate_identifier(raw: object, db: BoardDB) -> int:
    """Validate a client id and check that the client exists.

    An integer too large for the id column is reported as not found.

    Raises:
        InvalidIdError: If raw is not an integer or no such client exists
    """
    client_id = parse_integer(raw)
    if client_id is None:
        raise InvalidIdError("Id can only be integer.")
    if not BoardQueries(db).exists(client_id):
        raise InvalidIdError("Cannot find client with that id.")
    return client_id


def validate_lane(raw: object) -> Lane:
    """Validate a lane tag (exact match, case-sensitive).

    Raises:
        InvalidLaneError: If raw is not one of the recognized tags
    """
    if isinstance(raw, str) and raw in LANE_TAGS:
        return Lane(raw)
    raise InvalidLaneError(LANE_HINT)


def validate_priority(raw: object) -> int:
    """Validate a priority value.

    Raises:
        InvalidPriorityError: If raw is not an integer or is below 1
    """
    priority = parse_integer(raw)
    if priority is None:
        raise InvalidPriorityError("Priority can only be positive integer.")
    if priority < 1:
        raise InvalidPriorityError("Priority must be a positive integer starting from 1.")
    return priority


def validate_move_request(raw_id: object, body: Any, db: BoardDB) -> MoveRequest:
    """Validate a complete move request, short-circuiting on the first failure.

    Order matches the API contract: id, then body shape, then status, then
    priority. Keys other than ``status`` and ``priority`` are ignored; a
    key explicitly set to null counts as omitted.

    Raises:
        InvalidIdError, InvalidRequestError, InvalidLaneError, InvalidPriorityError
    """
    client_id = validate_identifier(raw_id, db)

    if body is None:
        body = {}
    if not isinstance(body, Mapping):
        raise InvalidRequestError("Request body must be a JSON object.")

    raw_lane = body.get("status")
    raw_priority = body.get("priority")
    lane = validate_lane(raw_lane) if raw_lane is not None else None
    priority = validate_priority(raw_priority) if raw_priority is not None else None
    return MoveRequest(client_id=client_id, lane=lane, priority=priority)
