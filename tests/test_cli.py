import logging

from nsudoku.__main__ import main
from nsudoku.config import LOG_LEVEL
from nsudoku.logging_utils import get_logger

from conftest import CLASSIC_PUZZLE


def test_cli_solves_puzzle(capsys):
    assert main(["test", "--sudoku", CLASSIC_PUZZLE, "--workers", "2"]) == 0
    out = capsys.readouterr().out
    assert "Testing dfs on:" in out
    assert "Solution:" in out
    assert "| 5 3 4 | 6 7 8 | 9 1 2 |" in out


def test_cli_naive_solver(capsys):
    assert main(["test", "naive", "--sudoku", "1..." + "." * 12]) == 0
    assert "Testing naive on:" in capsys.readouterr().out


def test_cli_three_dimensional(capsys):
    text = "1" + "." * 63
    assert main(["test", "--sudoku", text, "--ndim", "3", "--block-shape", "1,1,1"]) == 0
    assert "[:, :, 3]" in capsys.readouterr().out


def test_cli_unsatisfiable(capsys):
    assert main(["test", "--sudoku", "11.." + "." * 12]) == 1
    assert "No solution found for sudoku" in capsys.readouterr().out


def test_cli_invalid_puzzle(capsys):
    assert main(["test", "--sudoku", "123"]) == 2
    assert "Invalid puzzle" in capsys.readouterr().err


def test_cli_progress_bar(capsys):
    assert main(["test", "--sudoku", CLASSIC_PUZZLE, "--progress", "--split-depth", "2"]) == 0


def test_cli_log_level_option(capsys):
    logger = get_logger()
    try:
        assert main(["test", "naive", "--sudoku", "1..." + "." * 12, "--log-level", "WARNING"]) == 0
        assert logger.level == logging.WARNING
    finally:
        get_logger(LOG_LEVEL)
