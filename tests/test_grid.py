import pytest

from stickercut.pipeline import PipelineConfig
from stickercut.pipeline.stages.s4_grid import assign_to_grid, resolve_grid

from sheets import box_contour


def occupied(cells):
    return {(c.row, c.col): len(c.contours) for c in cells if not c.is_empty}


def test_cells_are_row_major_and_include_empty(started_logger):
    cells = assign_to_grid([], 300, 300, 2, 3, started_logger)

    assert [(c.row, c.col) for c in cells] == [
        (0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)
    ]
    assert [c.index for c in cells] == list(range(6))
    assert all(c.is_empty for c in cells)


def test_assignment_uses_bounding_box_centre(started_logger):
    # Box starts in cell (0, 0) but its centre is in (1, 1)
    contour = box_contour(80, 80, 160, 160)

    cells = assign_to_grid([contour], 300, 300, 3, 3, started_logger)

    assert occupied(cells) == {(1, 1): 1}


def test_last_row_and_column_absorb_overflow(started_logger):
    # 100 // 3 == 33, so a centre at 99.5 would land in column 3
    contour = box_contour(99, 99, 100, 100)

    cells = assign_to_grid([contour], 100, 100, 3, 3, started_logger)

    assert occupied(cells) == {(2, 2): 1}


def test_multiple_contours_share_a_cell(started_logger):
    contours = [box_contour(10, 10, 30, 30), box_contour(50, 40, 80, 70)]

    cells = assign_to_grid(contours, 300, 300, 3, 3, started_logger)

    assert occupied(cells) == {(0, 0): 2}
    assert cells[0].union_bbox() == (10, 10, 80, 70)


def test_grid_larger_than_image_does_not_divide_by_zero(started_logger):
    cells = assign_to_grid([box_contour(0, 0, 2, 2)], 2, 2, 4, 4, started_logger)
    assert occupied(cells) == {(1, 1): 1}


def test_fixed_grid_ignores_contour_count():
    config = PipelineConfig(rows=4, cols=2)
    assert resolve_grid(config, 0) == (4, 2)
    assert resolve_grid(config, 50) == (4, 2)


@pytest.mark.parametrize("count, expected", [(0, (2, 2)), (6, (2, 2)), (7, (3, 3)), (20, (3, 3))])
def test_adaptive_grid(count, expected):
    config = PipelineConfig(adaptive_grid=True)
    assert resolve_grid(config, count) == expected


def test_adaptive_grid_policy_is_configurable():
    config = PipelineConfig(
        adaptive_grid=True,
        adaptive_threshold=3,
        adaptive_large_grid=(4, 4),
        adaptive_small_grid=(1, 2),
    )
    assert resolve_grid(config, 3) == (1, 2)
    assert resolve_grid(config, 4) == (4, 4)
