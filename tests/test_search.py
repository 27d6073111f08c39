import threading

import numpy as np
import pytest

from nsudoku import solve, solve_puzzle
from nsudoku.csp.search import ParallelSearch, search
from nsudoku.csp.signal import SolutionSignal
from nsudoku.errors import Unsatisfiable
from nsudoku.grid.board import Board
from nsudoku.postprocess.render_result import board_to_text

from conftest import CLASSIC_SOLUTION


class CountingSignal(SolutionSignal):
    def __init__(self):
        super().__init__()
        self.accepted = 0

    def offer(self, board):
        ok = super().offer(board)
        if ok:
            self.accepted += 1
        return ok


def assert_valid_solution(board):
    assert board.is_solved()
    for group in board.topology.groups:
        values = [board.value(c) for c in group.cells]
        assert sorted(values) == list(range(1, board.size + 1))


def test_classic_puzzle_returns_known_solution(classic_puzzle):
    solution = solve_puzzle(classic_puzzle, workers=4)
    assert board_to_text(solution) == CLASSIC_SOLUTION
    assert_valid_solution(solution)


@pytest.mark.parametrize("workers,split_depth", [(1, 0), (1, 3), (4, 0), (4, 2), (8, 10)])
def test_worker_and_split_settings_agree(classic_puzzle, workers, split_depth):
    solution = solve_puzzle(classic_puzzle, workers=workers, split_depth=split_depth)
    assert board_to_text(solution) == CLASSIC_SOLUTION


def test_cube_with_line_groups_only():
    givens = {(0, 0, 0): 1, (1, 2, 3): 3, (3, 3, 3): 2, (2, 0, 1): 4}
    solution = solve((4, 4, 4), givens, (1, 1, 1), workers=4)

    values = solution.to_array()
    for axis in range(3):
        lines = np.moveaxis(values, axis, -1).reshape(-1, 4)
        for line in lines:
            assert sorted(line.tolist()) == [1, 2, 3, 4]
    for coord, value in givens.items():
        assert solution.value(coord) == value


def test_empty_board_is_solved():
    solution = solve((9, 9), {}, (3, 3), workers=4)
    assert_valid_solution(solution)


def test_duplicate_givens_are_unsatisfiable():
    with pytest.raises(Unsatisfiable):
        solve((9, 9), {(0, 0): 5, (0, 5): 5}, (3, 3))


def test_unsatisfiable_after_branching():
    # 4x4 ラテン方陣（ブロックなし）: 1行目に 1 を置ける列がない。
    # 伝播だけでは候補は空にならず、分岐してはじめて矛盾が分かる
    givens = {(1, 0): 1, (2, 1): 1, (3, 2): 1, (0, 3): 2}
    progress = []
    with pytest.raises(Unsatisfiable):
        solve((4, 4), givens, (1, 1), workers=2, split_depth=1, progress_callback=progress.append)
    assert max(p.explored for p in progress) == pytest.approx(1.0)


def test_search_does_not_modify_input(topology_4x4):
    board = Board.create(topology_4x4, {(0, 0): 1})
    before = board.masks.copy()
    solution = search(board, workers=2)
    assert solution is not None
    assert np.array_equal(board.masks, before)


def test_progress_reports_stay_in_range(classic_puzzle, topology_9x9):
    board = Board.create(topology_9x9, classic_puzzle.givens)
    progress = []
    lock = threading.Lock()

    def observer(p):
        with lock:
            progress.append(p.explored)

    search(board, workers=4, split_depth=4, progress_callback=observer)
    assert progress
    assert all(0.0 <= x <= 1.0 for x in progress)


def test_injected_solution_stops_the_search(topology_9x9):
    board = Board.create(topology_9x9, {})
    sentinel = board.clone()
    signal = CountingSignal()

    def inject(progress):
        signal.offer(sentinel)

    # ワーカー1つ: 根のタスクが子を投げ終えた直後に信号が立つ
    runner = ParallelSearch(workers=1, split_depth=3, signal=signal, progress_callback=inject)
    result = runner.run(board)

    assert result is sentinel
    assert signal.accepted == 1
    # 根以外のタスクは伝播もせずに打ち切られる
    assert runner.nodes_visited == 1


def test_only_one_solution_is_accepted_with_many_workers(topology_9x9):
    board = Board.create(topology_9x9, {})
    signal = CountingSignal()
    result = ParallelSearch(workers=8, split_depth=2, signal=signal).run(board)

    assert signal.accepted == 1
    assert result is signal.solution
    assert_valid_solution(result)


def test_signal_set_before_start_returns_it(topology_4x4):
    board = Board.create(topology_4x4, {})
    signal = SolutionSignal()
    sentinel = board.clone()
    assert signal.offer(sentinel)
    assert search(board, workers=2, signal=signal) is sentinel


def test_signal_first_writer_wins(topology_4x4):
    signal = SolutionSignal()
    boards = [Board.create(topology_4x4, {}) for _ in range(16)]
    results = []
    barrier = threading.Barrier(len(boards))

    def offer(b):
        barrier.wait()
        results.append(signal.offer(b))

    threads = [threading.Thread(target=offer, args=(b,)) for b in boards]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert signal.rejected == len(boards) - 1
    assert signal.solution in boards


def test_worker_errors_are_raised(topology_4x4):
    board = Board.create(topology_4x4, {})

    def broken(progress):
        raise RuntimeError("observer failed")

    with pytest.raises(RuntimeError, match="observer failed"):
        search(board, workers=2, progress_callback=broken)
