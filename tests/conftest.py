import pytest

from nsudoku.grid.groups import Topology
from nsudoku.grid.parser import parse_puzzle

# Wikipedia の例題（解は一意）
CLASSIC_PUZZLE = (
    "53..7....6..195....98....6.8...6...34..8.3..17...2...6.6....28....419..5....8..79"
)
CLASSIC_SOLUTION = (
    "534678912672195348198342567859761423426853791713924856961537284287419635345286179"
)


@pytest.fixture
def classic_puzzle():
    return parse_puzzle(CLASSIC_PUZZLE)


@pytest.fixture
def topology_9x9():
    return Topology((9, 9), (3, 3))


@pytest.fixture
def topology_4x4():
    return Topology((4, 4), (2, 2))


@pytest.fixture
def topology_cube():
    # 4x4x4, line グループのみ
    return Topology((4, 4, 4), (1, 1, 1))
