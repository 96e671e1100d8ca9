# src/shiptivity/core/store/__init__.py
"""Board store: the clients table and everything that touches it.

Primary API:
    BoardDB - Database connection management and the ordering lock
    BoardQueries - Read-only listings
    UnitOfWork - Atomic application of mutation lists
"""

from shiptivity.core.store.database import BoardDB, SchemaCompatibilityError
from shiptivity.core.store.integrity import find_violations, renumber_lanes
from shiptivity.core.store.queries import BoardQueries
from shiptivity.core.store.repositories import ClientRepository
from shiptivity.core.store.schema import clients_table, metadata
from shiptivity.core.store.seed import SAMPLE_CLIENTS, append_client, append_clients, seed_sample_clients
from shiptivity.core.store.unit_of_work import (
    CommitResult,
    InsertClient,
    Mutation,
    PlaceClient,
    ShiftPriorities,
    StaleMutationError,
    UnitOfWork,
)

__all__ = [
    "SAMPLE_CLIENTS",
    "BoardDB",
    "BoardQueries",
    "ClientRepository",
    "CommitResult",
    "InsertClient",
    "Mutation",
    "PlaceClient",
    "SchemaCompatibilityError",
    "ShiftPriorities",
    "StaleMutationError",
    "UnitOfWork",
    "append_client",
    "append_clients",
    "clients_table",
    "find_violations",
    "metadata",
    "renumber_lanes",
    "seed_sample_clients",
]
