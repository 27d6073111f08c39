from collections import Counter

import pytest

from nsudoku import solve
from nsudoku.errors import InvalidPuzzle, InvalidShape
from nsudoku.grid.groups import Topology, generate_groups


def test_classic_groups_are_rows_columns_and_boxes(topology_9x9):
    groups = topology_9x9.groups
    kinds = Counter(g.kind for g in groups)
    assert kinds == {"line": 18, "block": 9}

    # 軸0 に沿って変化する line（= 1列目）が最初
    assert groups[0].axis == 0
    assert groups[0].cells == tuple((r, 0) for r in range(9))
    assert groups[9].axis == 1
    assert groups[9].cells == tuple((0, c) for c in range(9))
    first_box = [g for g in groups if g.kind == "block"][0]
    assert set(first_box.cells) == {(r, c) for r in range(3) for c in range(3)}


def test_every_group_has_v_distinct_cells(topology_9x9, topology_cube):
    for topology in (topology_9x9, topology_cube):
        for group in topology.groups:
            assert group.size == topology.size
            assert len(set(group.cells)) == topology.size
            assert [topology.index_of(c) for c in group.cells] == list(group.indices)


def test_every_cell_is_in_one_line_group_per_axis(topology_cube):
    per_cell = Counter()
    for group in topology_cube.groups:
        assert group.kind == "line"
        for cell in group.cells:
            per_cell[(cell, group.axis)] += 1

    for coord in topology_cube.coords():
        for axis in range(3):
            assert per_cell[(coord, axis)] == 1


def test_line_group_varies_along_its_axis_only(topology_cube):
    for group in topology_cube.groups:
        for axis in range(3):
            values = {cell[axis] for cell in group.cells}
            if axis == group.axis:
                assert values == {0, 1, 2, 3}
            else:
                assert len(values) == 1


def test_degenerate_blocks_produce_line_groups_only(topology_cube):
    assert len(topology_cube.groups) == 3 * 16


def test_three_dimensional_blocks():
    topology = Topology((4, 4, 4), (2, 2, 1))
    blocks = [g for g in topology.groups if g.kind == "block"]
    assert len(blocks) == 16
    assert set(blocks[0].cells) == {(0, 0, 0), (0, 1, 0), (1, 0, 0), (1, 1, 0)}


def test_generation_is_deterministic():
    a = generate_groups((9, 9), (3, 3))
    b = generate_groups((9, 9), (3, 3))
    assert a == b


def test_peers_of_classic_cell(topology_9x9):
    peers = topology_9x9.peers[topology_9x9.index_of((4, 4))]
    assert len(peers) == 20
    assert topology_9x9.index_of((4, 4)) not in peers
    assert list(peers) == sorted(peers)


@pytest.mark.parametrize(
    "block_shape",
    [
        (2, 3),     # 2 が 9 を割り切らない
        (3, 3, 1),  # 軸の数が合わない
        (9, 9),     # 体積が V ではない
        (3, 1),     # 体積が V でも 1 でもない
        (0, 9),
    ],
)
def test_invalid_block_shape(block_shape):
    with pytest.raises(InvalidShape):
        generate_groups((9, 9), block_shape)


@pytest.mark.parametrize("axis_lengths", [(9, 4), (), (0, 0), (63, 63)])
def test_invalid_axis_lengths(axis_lengths):
    with pytest.raises(InvalidPuzzle):
        Topology(axis_lengths, (1,) * len(axis_lengths))


def test_too_many_cells_is_rejected_before_building_peers():
    # 62**4 マスは記号数・次元数それぞれの上限内だが、総数が多すぎる
    with pytest.raises(InvalidPuzzle, match="cells"):
        Topology((62,) * 4, (1,) * 4)
    with pytest.raises(InvalidPuzzle):
        solve((62,) * 4, {}, (1,) * 4)
