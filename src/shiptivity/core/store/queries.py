"""Read-only listings of the board.

Each call runs in its own short transaction, so callers only ever see
committed state, unless a connection is passed in: reads made while
planning a write share the write's transaction. Nothing here caches
priorities.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Connection, func, select

from shiptivity.contracts.enums import Lane
from shiptivity.contracts.records import Client
from shiptivity.core.store.database import BoardDB
from shiptivity.core.store.repositories import ClientRepository
from shiptivity.core.store.schema import CLIENT_ID_MAX, CLIENT_ID_MIN, clients_table


class BoardQueries:
    """Query facade over the clients table."""

    def __init__(self, db: BoardDB) -> None:
        self._db = db
        self._clients = ClientRepository()

    @contextmanager
    def _reading(self, conn: Connection | None) -> Iterator[Connection]:
        if conn is not None:
            yield conn
            return
        with self._db.connection() as own:
            yield own

    def list_all(self, *, conn: Connection | None = None) -> list[Client]:
        """All clients ordered by (lane tag, priority)."""
        query = select(clients_table).order_by(
            clients_table.c.status,
            clients_table.c.priority,
            clients_table.c.id,
        )
        with self._reading(conn) as c:
            rows = list(c.execute(query).fetchall())
        return self._clients.load_all(rows)

    def list_by_lane(self, lane: Lane, *, conn: Connection | None = None) -> list[Client]:
        """Clients in one lane ordered by priority."""
        query = (
            select(clients_table)
            .where(clients_table.c.status == lane.value)
            .order_by(clients_table.c.priority, clients_table.c.id)
        )
        with self._reading(conn) as c:
            rows = list(c.execute(query).fetchall())
        return self._clients.load_all(rows)

    def get(self, client_id: int, *, conn: Connection | None = None) -> Client | None:
        """Single client by id, or None if it does not exist.

        An id no INTEGER column can hold names no client.
        """
        if not CLIENT_ID_MIN <= client_id <= CLIENT_ID_MAX:
            return None
        query = select(clients_table).where(clients_table.c.id == client_id).limit(1)
        with self._reading(conn) as c:
            row = c.execute(query).fetchone()
        return self._clients.load(row) if row is not None else None

    def exists(self, client_id: int) -> bool:
        """Point read used by the validator."""
        if not CLIENT_ID_MIN <= client_id <= CLIENT_ID_MAX:
            return False
        query = select(clients_table.c.id).where(clients_table.c.id == client_id).limit(1)
        with self._db.connection() as conn:
            return conn.execute(query).first() is not None

    def lane_sizes(self, *, conn: Connection | None = None) -> dict[Lane, int]:
        """Number of clients per lane (lanes with no clients report 0)."""
        query = select(clients_table.c.status, func.count()).group_by(clients_table.c.status)
        sizes = dict.fromkeys(Lane, 0)
        with self._reading(conn) as c:
            for status, count in c.execute(query):
                sizes[Lane(status)] = count
        return sizes

    def count(self, *, conn: Connection | None = None) -> int:
        query = select(func.count()).select_from(clients_table)
        with self._reading(conn) as c:
            return int(c.execute(query).scalar_one())
