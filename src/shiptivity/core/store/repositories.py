"""Repository layer for board records.

Handles the seam between SQLAlchemy rows (strings) and domain objects
(strict enum types). This is NOT a trust boundary - if the database
has bad data, we crash.
"""

from typing import Any

from sqlalchemy.engine import Row as SARow

from shiptivity.contracts.enums import Lane
from shiptivity.contracts.records import Client


class ClientRepository:
    """Repository for Client records."""

    def load(self, row: SARow[Any]) -> Client:
        """Load Client from database row.

        Converts the status string to a Lane. Crashes on invalid data.
        """
        return Client(
            id=row.id,
            status=Lane(row.status),  # Convert HERE
            priority=row.priority,
            name=row.name,
            description=row.description,
        )

    def load_all(self, rows: list[SARow[Any]]) -> list[Client]:
        return [self.load(row) for row in rows]
