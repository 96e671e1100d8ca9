# src/shiptivity/engine/reorder.py
"""Reorder engine: moves clients while keeping every lane gapless.

A move is planned as a pure function of the client's current position,
the current lane sizes, and the requested lane/priority. The plan is a
short list of mutations (shift a priority range, place the client) that
the unit of work applies in the same transaction the inputs were read in.

Invariant maintained for every lane L after every committed move:

    sorted(priorities in L) == [1, 2, ..., count(L)]

Requested priorities past the end of a lane are clamped: to count(L) for
a move within L, and to count(L) + 1 (append) for a move into L.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy import Connection

from shiptivity.contracts.enums import Lane
from shiptivity.contracts.errors import ClientNotFoundError, StoreCommitFailedError
from shiptivity.contracts.records import BoardPosition, MoveOutcome, MoveRequest
from shiptivity.core.store.database import BoardDB
from shiptivity.core.store.queries import BoardQueries
from shiptivity.core.store.unit_of_work import Mutation, PlaceClient, ShiftPriorities, UnitOfWork

slog = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MovePlan:
    """Mutations needed to take one client from ``source`` to ``target``.

    ``mutations`` is empty for a no-op. ``clamped`` records that the
    requested priority was beyond the end of the destination lane.
    """

    client_id: int
    source: BoardPosition
    target: BoardPosition
    mutations: tuple[Mutation, ...]
    clamped: bool = False

    @property
    def is_noop(self) -> bool:
        return not self.mutations


def plan_move(
    client_id: int,
    source: BoardPosition,
    lane_sizes: dict[Lane, int],
    *,
    lane: Lane | None = None,
    priority: int | None = None,
) -> MovePlan:
    """Compute the mutations for a move. Pure function, no I/O.

    Args:
        client_id: Client being moved
        source: Its current (lane, priority)
        lane_sizes: Current number of clients per lane (source lane included)
        lane: Requested lane, None to keep the current one
        priority: Requested priority (>= 1), None to keep the current one

    Returns:
        MovePlan whose mutations, applied in order, preserve the invariant.
    """
    if priority is not None and priority < 1:
        raise ValueError(f"priority must be >= 1, got {priority}")

    to_lane = lane if lane is not None else source.lane
    requested = priority if priority is not None else source.priority

    if to_lane == source.lane:
        last_slot = lane_sizes[to_lane]
    else:
        last_slot = lane_sizes[to_lane] + 1
    to_priority = min(requested, last_slot)
    clamped = to_priority != requested
    target = BoardPosition(to_lane, to_priority)

    mutations: list[Mutation] = []
    if to_lane == source.lane:
        if to_priority > source.priority:
            # Moving toward the back: (P0, P1] shift forward
            mutations.append(ShiftPriorities(to_lane, delta=-1, lower=source.priority + 1, upper=to_priority))
        elif to_priority < source.priority:
            # Moving toward the front: [P1, P0) shift back
            mutations.append(ShiftPriorities(to_lane, delta=+1, lower=to_priority, upper=source.priority - 1))
        else:
            return MovePlan(client_id, source, target, (), clamped)
    else:
        # Close the gap behind us, then open a slot at P1
        mutations.append(ShiftPriorities(source.lane, delta=-1, lower=source.priority + 1))
        mutations.append(ShiftPriorities(to_lane, delta=+1, lower=to_priority))

    mutations.append(PlaceClient(client_id, to_lane, to_priority))
    return MovePlan(client_id, source, target, tuple(mutations), clamped)


class ReorderEngine:
    """Applies client moves as atomic, invariant-preserving commits.

    Example:
        engine = ReorderEngine(db)
        outcome = engine.move(7, lane=Lane.IN_PROGRESS, priority=1)
    """

    def __init__(self, db: BoardDB) -> None:
        self._db = db
        self._queries = BoardQueries(db)
        self._uow = UnitOfWork(db)

    def move(self, client_id: int, lane: Lane | None = None, priority: int | None = None) -> MoveOutcome:
        """Move a client to a new lane and/or priority.

        The current position and lane sizes are read in the same write
        transaction that applies the plan, so concurrent moves (from this
        process or another one on the same database) never interleave.

        Raises:
            ClientNotFoundError: If the client no longer exists
            StoreCommitFailedError: If the commit failed (nothing was written)
        """
        log = slog.bind(client_id=client_id)
        plans: list[MovePlan] = []

        def plan_from_store(conn: Connection) -> tuple[Mutation, ...]:
            client = self._queries.get(client_id, conn=conn)
            if client is None:
                raise ClientNotFoundError(client_id)
            plan = plan_move(
                client_id,
                BoardPosition(client.status, client.priority),
                self._queries.lane_sizes(conn=conn),
                lane=lane,
                priority=priority,
            )
            plans.append(plan)
            return plan.mutations

        result = self._uow.run(plan_from_store)

        if not result.succeeded:
            positions: dict[str, object] = {}
            if plans:
                plan = plans[0]
                positions = {
                    "from_lane": plan.source.lane.value,
                    "from_priority": plan.source.priority,
                    "to_lane": plan.target.lane.value,
                    "to_priority": plan.target.priority,
                }
            log.error("client_move_failed", error=result.error, **positions)
            raise StoreCommitFailedError(result.error or "unknown store error", client_id=client_id) from result.exception

        plan = plans[0]
        if plan.is_noop:
            log.debug("client_move_noop", lane=plan.source.lane.value, priority=plan.source.priority)
            return MoveOutcome(client_id, plan.source, plan.target, changed=False, clamped=plan.clamped)

        log.info(
            "client_moved",
            from_lane=plan.source.lane.value,
            from_priority=plan.source.priority,
            to_lane=plan.target.lane.value,
            to_priority=plan.target.priority,
            clamped=plan.clamped,
            rows_affected=result.rows_affected,
        )
        return MoveOutcome(
            client_id,
            plan.source,
            plan.target,
            changed=True,
            clamped=plan.clamped,
            rows_affected=result.rows_affected,
        )

    def apply(self, request: MoveRequest) -> MoveOutcome:
        """Move according to a validated MoveRequest."""
        return self.move(request.client_id, lane=request.lane, priority=request.priority)
