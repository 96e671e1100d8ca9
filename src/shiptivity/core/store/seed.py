"""Client creation for demo boards and tests.

Clients are normally created outside this service. These helpers exist so
a fresh database can be populated; every insert appends to the end of its
lane so the lane invariant holds from the start.
"""

from collections.abc import Iterable

from sqlalchemy import Connection

from shiptivity.contracts.enums import Lane
from shiptivity.contracts.errors import StoreCommitFailedError
from shiptivity.contracts.records import Client
from shiptivity.core.store.database import BoardDB
from shiptivity.core.store.queries import BoardQueries
from shiptivity.core.store.unit_of_work import InsertClient, UnitOfWork

# (name, description, lane) - listed in lane priority order
SAMPLE_CLIENTS: tuple[tuple[str, str, Lane], ...] = (
    ("Stark, White and Abbott", "Cloned Optimal Architecture", Lane.IN_PROGRESS),
    ("Wiza LLC", "Exclusive Bandwidth-Monitored Implementation", Lane.COMPLETE),
    ("Nolan LLC", "Vision-Oriented 4Thgeneration Graphicaluserinterface", Lane.BACKLOG),
    ("Thompson PLC", "Streamlined Regional Knowledgeuser", Lane.IN_PROGRESS),
    ("Walker-Williamson", "Team-Oriented 6Thgeneration Matrix", Lane.IN_PROGRESS),
    ("Boehm and Sons", "Automated Systematic Paradigm", Lane.BACKLOG),
    ("Runolfsson, Hegmann and Block", "Integrated Transitional Strategy", Lane.BACKLOG),
    ("Schumm-Labadie", "Operative Heuristic Challenge", Lane.BACKLOG),
    ("Kohler Group", "Re-Contextualized Multi-Tasking Attitude", Lane.BACKLOG),
    ("Romaguera Inc", "Managed Foreground Toolset", Lane.BACKLOG),
    ("Reilly-King", "Future-Proofed Interactive Toolset", Lane.COMPLETE),
    ("Emard, Champlin and Runolfsdottir", "Devolved Needs-Based Capability", Lane.BACKLOG),
    ("Fritsch, Cronin and Wolff", "Open-Source 3Rdgeneration Website", Lane.COMPLETE),
    ("Borer LLC", "Profit-Focused Incremental Orchestration", Lane.BACKLOG),
    ("Emmerich-Ankunding", "User-Centric Stable Extranet", Lane.IN_PROGRESS),
    ("Willms-Abbott", "Progressive Bandwidth-Monitored Access", Lane.IN_PROGRESS),
    ("Brekke PLC", "Intuitive User-Facing Customerloyalty", Lane.COMPLETE),
    ("Bins, Toy and Klocko", "Integrated Assymetric Software", Lane.BACKLOG),
    ("Hodkiewicz-Hayes", "Programmable Systematic Securedline", Lane.BACKLOG),
    ("Murphy, Lang and Ferry", "Organized Explicit Access", Lane.BACKLOG),
)


def append_client(db: BoardDB, name: str | None, description: str | None, lane: Lane) -> Client:
    """Create a client at the end of ``lane``.

    Raises:
        StoreCommitFailedError: If the insert could not be committed
    """
    [client_id] = _append(db, [(name, description, lane)])
    client = BoardQueries(db).get(client_id)
    if client is None:
        raise StoreCommitFailedError(f"client {client_id} vanished after insert")
    return client


def append_clients(db: BoardDB, clients: Iterable[tuple[str | None, str | None, Lane]]) -> list[Client]:
    """Create several clients in one atomic commit, each appended to its lane."""
    _append(db, list(clients))
    return BoardQueries(db).list_all()


def _plan_appends(sizes: dict[Lane, int], clients: Iterable[tuple[str | None, str | None, Lane]]) -> list[InsertClient]:
    mutations = []
    for name, description, lane in clients:
        sizes[lane] += 1
        mutations.append(InsertClient(lane, sizes[lane], name=name, description=description))
    return mutations


def _append(db: BoardDB, clients: list[tuple[str | None, str | None, Lane]]) -> tuple[int, ...]:
    queries = BoardQueries(db)
    result = UnitOfWork(db).run(lambda conn: _plan_appends(queries.lane_sizes(conn=conn), clients))
    if not result.succeeded:
        raise StoreCommitFailedError(result.error or "unknown store error") from result.exception
    return result.inserted_ids


def seed_sample_clients(db: BoardDB) -> int:
    """Populate an empty board with SAMPLE_CLIENTS.

    Returns:
        Number of clients inserted (0 if the board already had clients).
    """
    queries = BoardQueries(db)

    def plan_seed(conn: Connection) -> list[InsertClient]:
        if queries.count(conn=conn) > 0:
            return []
        return _plan_appends(queries.lane_sizes(conn=conn), SAMPLE_CLIENTS)

    result = UnitOfWork(db).run(plan_seed)
    if not result.succeeded:
        raise StoreCommitFailedError(result.error or "unknown store error") from result.exception
    return len(result.inserted_ids)
