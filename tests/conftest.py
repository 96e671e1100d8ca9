# tests/conftest.py
"""Shared test fixtures and helpers.

Store fixtures:
- board_db: Fresh in-memory BoardDB per test
- file_board_db: File-backed BoardDB in tmp_path (WAL, real connection pool)

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from shiptivity.core.store.database import BoardDB

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Tests that call configure_logging() must not leak into later tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def board_db() -> Iterator[BoardDB]:
    """Fresh in-memory board database.

    Function-scoped: every test starts with an empty clients table.
    """
    db = BoardDB.in_memory()
    yield db
    db.close()


@pytest.fixture
def file_board_db(tmp_path: Path) -> Iterator[BoardDB]:
    """File-backed board database (WAL mode, pooled connections)."""
    db = BoardDB(f"sqlite:///{tmp_path / 'clients.db'}")
    yield db
    db.close()
