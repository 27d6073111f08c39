import logging

from nsudoku.config import LOG_LEVEL
from nsudoku.csp.search import ParallelSearch
from nsudoku.grid.board import Board
from nsudoku.logging_utils import LOGGER_NAME, get_logger, get_search_debug_logger


def test_get_logger_is_configured_once():
    logger = get_logger()
    assert logger.name == LOGGER_NAME
    assert get_logger() is logger
    assert len(logger.handlers) == 1


def test_search_debug_log_records_guesses(tmp_path, topology_4x4):
    log_file = tmp_path / "debug" / "search.log"
    logger = get_search_debug_logger(str(log_file))
    assert logger.propagate is False

    runner = ParallelSearch(workers=1, split_depth=1, debug_log=True)
    solution = runner.run(Board.create(topology_4x4, {(0, 0): 1}))
    assert solution is not None

    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "Guess" in text


def test_get_logger_level_defaults_to_config_and_can_be_switched():
    logger = get_logger()
    assert logger.level == logging.getLevelName(LOG_LEVEL)
    try:
        assert get_logger("WARNING").level == logging.WARNING
        assert get_logger() is logger
        assert logger.level == logging.WARNING
    finally:
        get_logger(LOG_LEVEL)
