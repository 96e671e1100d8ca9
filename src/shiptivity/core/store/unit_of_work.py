"""Explicit unit of work for board writes.

Every write to the clients table is expressed as a list of mutation
values and applied inside one transaction: either all of them are
retained or none are. UnitOfWork.run() also computes the list inside
that transaction, from reads that no concurrent writer can invalidate.

Usage:
    uow = UnitOfWork(db)
    result = uow.commit([
        ShiftPriorities(Lane.BACKLOG, delta=-1, lower=3),
        PlaceClient(client_id=7, lane=Lane.COMPLETE, priority=1),
    ])
    if not result.succeeded:
        ...
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog
from sqlalchemy import Connection, CursorResult, and_, insert, update
from sqlalchemy.exc import SQLAlchemyError

from shiptivity.contracts.enums import Lane
from shiptivity.core.store.database import BoardDB
from shiptivity.core.store.schema import clients_table

slog = structlog.get_logger(__name__)


class StaleMutationError(Exception):
    """A mutation matched a different number of rows than it requires."""


@dataclass(frozen=True, slots=True)
class ShiftPriorities:
    """Add ``delta`` to the priority of every client in ``lane`` whose
    priority lies within [lower, upper] (either bound may be open).
    """

    lane: Lane
    delta: int
    lower: int | None = None
    upper: int | None = None

    def __post_init__(self) -> None:
        if self.delta == 0:
            raise ValueError("ShiftPriorities delta must be non-zero")
        if self.lower is not None and self.upper is not None and self.lower > self.upper:
            raise ValueError(f"Empty shift range [{self.lower}, {self.upper}]")

    def apply(self, conn: Connection) -> CursorResult[Any]:
        conditions = [clients_table.c.status == self.lane.value]
        if self.lower is not None:
            conditions.append(clients_table.c.priority >= self.lower)
        if self.upper is not None:
            conditions.append(clients_table.c.priority <= self.upper)
        stmt = update(clients_table).where(and_(*conditions)).values(priority=clients_table.c.priority + self.delta)
        return conn.execute(stmt)

    def describe(self) -> str:
        lo = "-inf" if self.lower is None else str(self.lower)
        hi = "+inf" if self.upper is None else str(self.upper)
        return f"shift {self.lane.value}[{lo}, {hi}] by {self.delta:+d}"


@dataclass(frozen=True, slots=True)
class PlaceClient:
    """Put one existing client at (lane, priority)."""

    client_id: int
    lane: Lane
    priority: int

    def apply(self, conn: Connection) -> CursorResult[Any]:
        stmt = update(clients_table).where(clients_table.c.id == self.client_id).values(status=self.lane.value, priority=self.priority)
        result = conn.execute(stmt)
        if result.rowcount != 1:
            raise StaleMutationError(f"place client {self.client_id}: expected 1 row, matched {result.rowcount}")
        return result

    def describe(self) -> str:
        return f"place client {self.client_id} at {self.lane.value}/{self.priority}"


@dataclass(frozen=True, slots=True)
class InsertClient:
    """Create a client at (lane, priority). Only used for seeding."""

    lane: Lane
    priority: int
    name: str | None = None
    description: str | None = None

    def apply(self, conn: Connection) -> CursorResult[Any]:
        stmt = insert(clients_table).values(
            name=self.name,
            description=self.description,
            status=self.lane.value,
            priority=self.priority,
        )
        return conn.execute(stmt)

    def describe(self) -> str:
        return f"insert {self.name!r} at {self.lane.value}/{self.priority}"


Mutation = ShiftPriorities | PlaceClient | InsertClient

# Computes the mutations from reads made on the write transaction's connection.
Planner = Callable[[Connection], Sequence[Mutation]]


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Outcome of UnitOfWork.commit() / UnitOfWork.run().

    Attributes:
        succeeded: True if every mutation was applied and committed
        rows_affected: Rows written (0 on failure - nothing was retained)
        mutations: Number of mutations in the unit
        inserted_ids: Primary keys of clients created by InsertClient, in order
        error: Description of the failure, if any
        exception: The underlying exception, if any
    """

    succeeded: bool
    rows_affected: int = 0
    mutations: int = 0
    inserted_ids: tuple[int, ...] = ()
    error: str | None = None
    exception: BaseException | None = field(default=None, compare=False)


class UnitOfWork:
    """Applies mutation lists as single atomic commits.

    Everything runs inside BoardDB.write_transaction(): the ordering lock
    keeps other writers in this process out, and the IMMEDIATE transaction
    keeps writers in other processes out.
    """

    def __init__(self, db: BoardDB) -> None:
        self._db = db

    def commit(self, mutations: Sequence[Mutation]) -> CommitResult:
        """Apply a precomputed mutation list in one transaction.

        Returns:
            CommitResult. On failure the transaction is rolled back and
            the store is exactly as it was before the call.
        """
        if not mutations:
            return CommitResult(succeeded=True)
        return self.run(lambda conn: mutations)

    def run(self, planner: Planner) -> CommitResult:
        """Plan and apply mutations in the same transaction.

        ``planner`` reads the board through the connection it is given and
        returns the mutations to apply; no other writer can change the
        board between its reads and the writes. Exceptions other than store
        errors (e.g. the planner finding no such client) roll back and
        propagate unchanged.

        Returns:
            CommitResult, as for commit(). An empty plan commits nothing.
        """
        mutations: Sequence[Mutation] = ()
        rows_affected = 0
        inserted_ids: list[int] = []
        try:
            with self._db.write_transaction() as conn:
                mutations = planner(conn)
                for mutation in mutations:
                    result = mutation.apply(conn)
                    rows_affected += result.rowcount
                    if result.is_insert:
                        inserted_ids.append(result.inserted_primary_key[0])
        except (SQLAlchemyError, StaleMutationError) as e:
            slog.warning(
                "unit_of_work_rolled_back",
                mutations=[m.describe() for m in mutations],
                error=str(e),
            )
            return CommitResult(
                succeeded=False,
                mutations=len(mutations),
                error=str(e),
                exception=e,
            )

        if mutations:
            slog.debug("unit_of_work_committed", mutations=len(mutations), rows_affected=rows_affected)
        return CommitResult(
            succeeded=True,
            rows_affected=rows_affected,
            mutations=len(mutations),
            inserted_ids=tuple(inserted_ids),
        )
