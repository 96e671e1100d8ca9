# tests/fixtures/__init__.py
"""Shared factories for Shiptivity tests.

Available helpers:
- build_board: Populate lanes from name lists
- lane_order / board_snapshot: Read back for assertions
"""

from tests.fixtures.board import board_snapshot, build_board, lane_order

__all__ = [
    "board_snapshot",
    "build_board",
    "lane_order",
]
