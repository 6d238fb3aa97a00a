from __future__ import annotations

import pytest

from gbchess.engine.game import GameState
from gbchess.engine.perft import divide, perft


def test_perft_start_depths() -> None:
    g = GameState.new()
    assert perft(g, 0) == 1
    assert perft(g, 1) == 20
    assert perft(g, 2) == 400


def test_perft_leaves_position_untouched() -> None:
    g = GameState.new()
    before = g.board_flat()
    perft(g, 2)
    assert g.board_flat() == before
    assert g.white_to_move is True
    assert g.move_count == 0


def test_divide_sums_to_perft() -> None:
    g = GameState.new()
    per_move = divide(g, 2)
    assert len(per_move) == 20
    assert all(count == 20 for count in per_move.values())
    assert sum(per_move.values()) == 400


def test_bad_depths_rejected() -> None:
    g = GameState.new()
    with pytest.raises(ValueError):
        perft(g, -1)
    with pytest.raises(ValueError):
        divide(g, 0)
