from __future__ import annotations

import time
from typing import Optional, Union

import pandas as pd
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from nsudoku import solve_puzzle
from nsudoku.errors import InvalidPuzzle, InvalidShape, Unsatisfiable
from nsudoku.grid.parser import board_from_dataframe, parse_puzzle
from nsudoku.logging_utils import get_logger
from nsudoku.postprocess.render_result import build_result

logger = get_logger()

app = FastAPI()


class SolveRequest(BaseModel):
    puzzle: Optional[str] = None  # one symbol per cell, '.' for empty
    board: Optional[list[list[Union[int, str, None]]]] = None  # 2D array
    ndim: int = 2
    block_shape: Optional[list[int]] = None
    strategy: str = "dfs"
    workers: Optional[int] = None


@app.post("/api/solve")
def api_solve(request: SolveRequest):
    """
    Solver API endpoint.
    Receives a puzzle string or a 2D board, builds the puzzle and calls the solver.
    """
    if (request.puzzle is None) == (request.board is None):
        raise HTTPException(status_code=422, detail="exactly one of 'puzzle' or 'board' is required")
    if request.strategy not in ("dfs", "naive"):
        raise HTTPException(status_code=422, detail=f"unknown strategy: {request.strategy}")

    start = time.time()
    try:
        if request.puzzle is not None:
            puzzle = parse_puzzle(request.puzzle, ndim=request.ndim, block_shape=request.block_shape)
        else:
            # 2次元配列をDataFrameに変換
            df = pd.DataFrame(request.board)
            puzzle = board_from_dataframe(df, block_shape=request.block_shape)

        solution = solve_puzzle(puzzle, strategy=request.strategy, workers=request.workers)
    except (InvalidPuzzle, InvalidShape) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Unsatisfiable as e:
        duration_ms = int((time.time() - start) * 1000)
        return build_result(None, duration_ms, status="unsatisfiable", message=str(e))
    except Exception as e:
        logger.exception("solve failed")
        raise HTTPException(status_code=500, detail=str(e))

    duration_ms = int((time.time() - start) * 1000)
    return build_result(solution, duration_ms, message="Solved successfully.")
