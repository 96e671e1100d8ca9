"""Reorder engine: invariant-preserving client moves.

Example:
    from shiptivity.contracts import Lane
    from shiptivity.core.store import BoardDB
    from shiptivity.engine import ReorderEngine

    db = BoardDB.from_url("sqlite:///clients.db")
    ReorderEngine(db).move(3, lane=Lane.COMPLETE)
"""

from shiptivity.engine.reorder import MovePlan, ReorderEngine, plan_move

__all__ = [
    "MovePlan",
    "ReorderEngine",
    "plan_move",
]
