# src/shiptivity/core/store/schema.py
"""SQLAlchemy table definitions for the board store.

Uses SQLAlchemy Core (not ORM) for explicit control over the shift
statements the reorder engine issues.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

from shiptivity.contracts.enums import LANE_TAGS

# Shared metadata for all tables
metadata = MetaData()

# Range of a SQLite INTEGER (signed 64-bit); larger ids cannot be bound.
CLIENT_ID_MIN = -(2**63)
CLIENT_ID_MAX = 2**63 - 1

_LANE_LIST = ", ".join(f"'{tag}'" for tag in LANE_TAGS)

clients_table = Table(
    "clients",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text),
    Column("description", Text),
    Column("status", String(32), nullable=False),
    Column("priority", Integer, nullable=False),
    # (status, priority) uniqueness is maintained by the reorder engine, not
    # by a constraint: a single shift statement passes through duplicate
    # (status, priority) pairs row by row on SQLite.
    CheckConstraint("priority >= 1", name="ck_clients_priority_positive"),
    CheckConstraint(f"status IN ({_LANE_LIST})", name="ck_clients_status_lane"),
)

Index("ix_clients_status_priority", clients_table.c.status, clients_table.c.priority)
