"""Lane integrity verification and repair.

The reorder engine never breaks the lane invariant, but the clients table
can be written by other tools (imports, manual SQL). These helpers detect
lanes whose priorities are not exactly 1..N and rewrite them.
"""

from collections import Counter, defaultdict

import structlog
from sqlalchemy import Connection, select

from shiptivity.contracts.enums import Lane
from shiptivity.contracts.errors import StoreCommitFailedError
from shiptivity.contracts.records import LaneViolation
from shiptivity.core.store.database import BoardDB
from shiptivity.core.store.schema import clients_table
from shiptivity.core.store.unit_of_work import PlaceClient, UnitOfWork

slog = structlog.get_logger(__name__)


def _read_lanes(conn: Connection) -> dict[Lane, list[tuple[int, int]]]:
    """(id, priority) pairs per lane, in board order."""
    query = select(clients_table.c.id, clients_table.c.status, clients_table.c.priority).order_by(
        clients_table.c.status,
        clients_table.c.priority,
        clients_table.c.id,
    )
    lanes: dict[Lane, list[tuple[int, int]]] = defaultdict(list)
    for row in conn.execute(query):
        lanes[Lane(row.status)].append((row.id, row.priority))
    return lanes


def find_violations(db: BoardDB) -> list[LaneViolation]:
    """Report every lane whose priorities are not exactly {1..count}.

    Returns:
        One LaneViolation per broken lane, in Lane declaration order.
        Empty list when the board is consistent.
    """
    with db.connection() as conn:
        lanes = _read_lanes(conn)
    violations = []
    for lane in Lane:
        priorities = [priority for _, priority in lanes.get(lane, [])]
        count = len(priorities)
        seen = Counter(priorities)
        duplicates = tuple(sorted(p for p, n in seen.items() if n > 1))
        missing = tuple(p for p in range(1, count + 1) if p not in seen)
        out_of_range = tuple(sorted(p for p in seen if p < 1 or p > count))
        if duplicates or missing or out_of_range:
            violations.append(LaneViolation(lane, count, duplicates, missing, out_of_range))
    return violations


def renumber_lanes(db: BoardDB) -> int:
    """Rewrite every lane to priorities 1..N, keeping the current order.

    Ties (duplicate priorities) are broken by id. Runs as one atomic commit.

    Returns:
        Number of clients whose priority changed.

    Raises:
        StoreCommitFailedError: If the commit failed (nothing was written)
    """

    def plan_renumbering(conn: Connection) -> list[PlaceClient]:
        return [
            PlaceClient(client_id, lane, position)
            for lane, members in _read_lanes(conn).items()
            for position, (client_id, priority) in enumerate(members, start=1)
            if priority != position
        ]

    result = UnitOfWork(db).run(plan_renumbering)

    if not result.succeeded:
        raise StoreCommitFailedError(result.error or "unknown store error") from result.exception
    if result.mutations:
        slog.info("lanes_renumbered", clients_changed=result.mutations)
    return result.mutations
