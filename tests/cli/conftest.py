# tests/cli/conftest.py
"""CLI test fixtures.

Every command reads the database URL from SHIPTIVITY_DATABASE__URL, so the
fixtures point it at a board file in tmp_path.
"""

from pathlib import Path

import pytest

from shiptivity.contracts.enums import Lane
from shiptivity.core.store.database import BoardDB
from tests.fixtures.board import build_board


@pytest.fixture
def db_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Empty board file wired into the CLI environment."""
    url = f"sqlite:///{tmp_path / 'clients.db'}"
    monkeypatch.setenv("SHIPTIVITY_DATABASE__URL", url)
    # Keep INFO events out of stdout so command output can be parsed
    monkeypatch.setenv("SHIPTIVITY_LOGGING__LEVEL", "WARNING")
    return url


@pytest.fixture
def board_ids(db_url: str) -> dict[str, int]:
    """Small populated board: backlog A,B,C / in-progress X / complete Z."""
    with BoardDB(db_url) as db:
        return build_board(db, {Lane.BACKLOG: ["A", "B", "C"], Lane.IN_PROGRESS: ["X"], Lane.COMPLETE: ["Z"]})
