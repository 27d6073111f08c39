import numpy as np
import pytest

from nsudoku import build_board
from nsudoku.errors import Contradiction, InvalidPuzzle
from nsudoku.grid.bitset import bit, full_mask, popcount, single_value, values_of
from nsudoku.grid.board import Board


def test_bitset_helpers():
    mask = bit(1) | bit(3)
    assert values_of(mask) == [1, 3]
    assert popcount(mask) == 2
    assert single_value(mask) == 0
    assert single_value(bit(7)) == 7
    assert values_of(full_mask(4)) == [1, 2, 3, 4]


def test_create_with_givens(topology_4x4):
    board = Board.create(topology_4x4, {(0, 0): 1, (3, 2): 4})
    assert board.value((0, 0)) == 1
    assert board.value((3, 2)) == 4
    assert board.is_resolved((0, 0))
    assert board.candidates((1, 1)) == [1, 2, 3, 4]
    assert board.value((1, 1)) == 0
    assert board.unresolved_count() == 14
    assert not board.is_solved()


def test_givens_as_pairs(topology_4x4):
    board = Board.create(topology_4x4, [((1, 2), 3), ((1, 2), 3)])
    assert board.assignment() == {(1, 2): 3}


@pytest.mark.parametrize(
    "givens",
    [
        {(4, 0): 1},         # 座標が範囲外
        {(0, -1): 1},
        {(0, 0, 0): 1},      # 軸の数が違う
        {(0, 0): 5},         # 値が範囲外
        {(0, 0): 0},
        [((0, 0), 1), ((0, 0), 2)],  # 同じマスに別の値
    ],
)
def test_invalid_givens(topology_4x4, givens):
    with pytest.raises(InvalidPuzzle):
        Board.create(topology_4x4, givens)


def test_duplicate_givens_are_accepted_at_construction(topology_4x4):
    # 同じ行に同じ値: 構築は通し、伝播・探索で解なしになる
    board = Board.create(topology_4x4, {(0, 0): 2, (0, 3): 2})
    assert not board.is_consistent()


def test_clone_is_independent(topology_4x4):
    board = Board.create(topology_4x4, {(0, 0): 1})
    copy = board.clone()
    copy.assign((1, 1), 3)
    assert copy.value((1, 1)) == 3
    assert board.value((1, 1)) == 0
    assert copy.topology is board.topology


def test_eliminate(topology_4x4):
    board = Board.create(topology_4x4, {})
    assert board.eliminate((2, 2), 3)
    assert not board.eliminate((2, 2), 3)
    assert board.candidates((2, 2)) == [1, 2, 4]
    assert board.candidate_count((2, 2)) == 3


def test_eliminate_last_candidate_raises_and_keeps_mask(topology_4x4):
    board = Board.create(topology_4x4, {(0, 0): 1})
    before = board.candidate_mask((0, 0))

    with pytest.raises(Contradiction) as excinfo:
        board.eliminate((0, 0), 1)

    assert excinfo.value.coord == (0, 0)
    assert board.candidate_mask((0, 0)) == before == bit(1)
    assert board.value((0, 0)) == 1


def test_to_array_and_consistency(topology_4x4):
    values = np.array([
        [1, 2, 3, 4],
        [3, 4, 1, 2],
        [2, 1, 4, 3],
        [4, 3, 2, 1],
    ])
    board = Board.from_array(topology_4x4, values)
    assert board.is_solved()
    assert board.is_consistent()
    assert np.array_equal(board.to_array(), values)
    assert len(board.assignment()) == 16


def test_build_board_rejects_non_cubic_grid():
    with pytest.raises(InvalidPuzzle):
        build_board((9, 9, 3), {}, (3, 3, 1))
