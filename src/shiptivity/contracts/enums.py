"""Status codes and kinds used across subsystem boundaries.

Lane tags are stored verbatim in the database (clients.status) and on the
wire, so the enum values ARE the public vocabulary.
"""

from enum import StrEnum


class Lane(StrEnum):
    """Workflow stage a client belongs to.

    Stored in the database (clients.status).
    """

    BACKLOG = "backlog"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


LANE_TAGS: tuple[str, ...] = tuple(lane.value for lane in Lane)
