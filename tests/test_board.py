# tests/test_board.py
from __future__ import annotations

import numpy as np
import pytest

from blockfall.game.core.board import Board, BoardInvariantError


def test_out_of_bounds_is_occupied() -> None:
    b = Board.empty(h=20, w=10)
    assert b.is_occupied(-1, 0)
    assert b.is_occupied(10, 0)
    assert b.is_occupied(0, -1)
    assert b.is_occupied(0, 20)
    assert not b.is_occupied(0, 0)
    assert not b.is_occupied(9, 19)


def test_lock_cells_fills_with_color() -> None:
    b = Board.empty(h=4, w=4)
    b.lock_cells([(0, 0, 3), (1, 0, 3), (0, 1, 3), (1, 1, 3)])
    assert b.cell(0, 0) == 3
    assert b.is_occupied(1, 1)
    assert not b.is_occupied(2, 0)


def test_lock_cells_onto_filled_cell_raises_and_leaves_board_untouched() -> None:
    b = Board.empty(h=4, w=4)
    b.fill([(2, 0)], color_id=9)
    before = b.snapshot()
    with pytest.raises(BoardInvariantError, match="filled cell"):
        b.lock_cells([(0, 0, 1), (1, 0, 1), (2, 0, 1), (3, 0, 1)])
    np.testing.assert_array_equal(b.grid, before)


def test_lock_cells_out_of_bounds_raises() -> None:
    b = Board.empty(h=4, w=4)
    with pytest.raises(BoardInvariantError, match="outside board"):
        b.lock_cells([(3, 0, 1), (4, 0, 1)])
    assert b.is_empty()


def test_lock_cells_rejects_empty_color() -> None:
    b = Board.empty(h=4, w=4)
    with pytest.raises(BoardInvariantError, match="color id"):
        b.lock_cells([(0, 0, 0)])


def test_clear_full_rows_no_full_rows_is_noop() -> None:
    b = Board.empty(h=5, w=4)
    b.fill([(0, 0), (1, 0), (2, 0)], color_id=2)
    before = b.snapshot()
    assert b.clear_full_rows() == 0
    np.testing.assert_array_equal(b.grid, before)


def test_clear_full_rows_removes_simultaneously_and_compacts() -> None:
    b = Board.empty(h=6, w=4)
    # rows 0 and 2 full, rows 1, 3, 4 partial with distinguishable colors
    b.fill([(x, 0) for x in range(4)], color_id=1)
    b.fill([(0, 1)], color_id=2)
    b.fill([(x, 2) for x in range(4)], color_id=1)
    b.fill([(1, 3)], color_id=3)
    b.fill([(2, 4)], color_id=4)

    assert b.full_rows() == [0, 2]
    assert b.clear_full_rows() == 2

    # row 1 had one cleared row below it, rows 3 and 4 had two
    assert b.cell(0, 0) == 2
    assert b.cell(1, 1) == 3
    assert b.cell(2, 2) == 4
    assert int(np.count_nonzero(b.grid)) == 3
    assert not np.any(b.grid[3:, :])
    assert b.grid.shape == (6, 4)


def test_clear_four_rows_at_once() -> None:
    b = Board.empty(h=6, w=3)
    b.fill([(x, y) for x in range(3) for y in range(4)], color_id=5)
    b.fill([(1, 4)], color_id=6)
    assert b.clear_full_rows() == 4
    assert b.cell(1, 0) == 6
    assert int(np.count_nonzero(b.grid)) == 1

