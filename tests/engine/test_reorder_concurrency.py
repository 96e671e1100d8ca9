# tests/engine/test_reorder_concurrency.py
"""Concurrent moves against one store.

Moves from many threads, and from separate handles on the same file, must
serialize: after every run each lane is still exactly 1..N and no client
was lost or duplicated.
"""

import random
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from shiptivity.contracts.enums import Lane
from shiptivity.core.store.database import BoardDB
from shiptivity.core.store.queries import BoardQueries
from shiptivity.engine.reorder import ReorderEngine
from tests.fixtures.board import build_board
from tests.helpers.board_assertions import assert_lanes_contiguous

LAYOUT = {
    Lane.BACKLOG: [f"B{i}" for i in range(8)],
    Lane.IN_PROGRESS: [f"P{i}" for i in range(5)],
    Lane.COMPLETE: [f"C{i}" for i in range(3)],
}


def _random_moves(ids: list[int], count: int, seed: int) -> list[tuple[int, Lane, int]]:
    rng = random.Random(seed)
    lanes = list(Lane)
    return [(rng.choice(ids), rng.choice(lanes), rng.randint(1, 12)) for _ in range(count)]


@pytest.mark.parametrize("fixture_name", ["board_db", "file_board_db"])
def test_parallel_moves_keep_lanes_contiguous(fixture_name: str, request: pytest.FixtureRequest) -> None:
    db: BoardDB = request.getfixturevalue(fixture_name)
    ids = list(build_board(db, LAYOUT).values())
    engine = ReorderEngine(db)
    moves = _random_moves(ids, count=200, seed=1234)

    with ThreadPoolExecutor(max_workers=8) as executor:
        outcomes = list(executor.map(lambda m: engine.move(m[0], lane=m[1], priority=m[2]), moves))

    assert len(outcomes) == len(moves)
    assert_lanes_contiguous(db)
    assert sorted(c.id for c in BoardQueries(db).list_all()) == sorted(ids)


def test_parallel_moves_with_separate_engines(file_board_db: BoardDB) -> None:
    """Engines built per request (as the server does) share the store's lock."""
    ids = list(build_board(file_board_db, LAYOUT).values())
    moves = _random_moves(ids, count=120, seed=99)

    def run(move: tuple[int, Lane, int]) -> None:
        client_id, lane, priority = move
        ReorderEngine(file_board_db).move(client_id, lane=lane, priority=priority)

    with ThreadPoolExecutor(max_workers=6) as executor:
        list(executor.map(run, moves))

    assert_lanes_contiguous(file_board_db)
    assert BoardQueries(file_board_db).count() == len(ids)


def test_reads_during_moves_see_committed_state(file_board_db: BoardDB) -> None:
    ids = list(build_board(file_board_db, LAYOUT).values())
    moves = _random_moves(ids, count=100, seed=7)
    engine = ReorderEngine(file_board_db)
    queries = BoardQueries(file_board_db)

    def reader() -> int:
        for _ in range(50):
            # Snapshot taken while moves are running must hold every client once
            assert queries.count() == len(ids)
        return 50

    with ThreadPoolExecutor(max_workers=4) as executor:
        read_future = executor.submit(reader)
        list(executor.map(lambda m: engine.move(m[0], lane=m[1], priority=m[2]), moves))
        assert read_future.result() == 50

    assert_lanes_contiguous(file_board_db)


def test_parallel_moves_through_two_handles_on_one_file(tmp_path: Path) -> None:
    """Two BoardDB handles (server and CLI) have separate process locks.

    Only the store's IMMEDIATE write transaction keeps their
    read-plan-write cycles from interleaving.
    """
    url = f"sqlite:///{tmp_path / 'clients.db'}"
    with BoardDB(url) as server_db, BoardDB(url) as cli_db:
        ids = list(build_board(server_db, LAYOUT).values())
        engines = [ReorderEngine(server_db), ReorderEngine(cli_db)]
        moves = _random_moves(ids, count=200, seed=2024)

        def run(indexed: tuple[int, tuple[int, Lane, int]]) -> None:
            index, (client_id, lane, priority) = indexed
            engines[index % 2].move(client_id, lane=lane, priority=priority)

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(run, enumerate(moves)))

        for db in (server_db, cli_db):
            assert_lanes_contiguous(db)
            assert sorted(c.id for c in BoardQueries(db).list_all()) == sorted(ids)
