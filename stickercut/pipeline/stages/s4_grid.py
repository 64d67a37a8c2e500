"""
Stage 4: Grid Assignment by Centroid
"""

import math

from ..config import PipelineConfig
from ..logger import PipelineLogger
from ..models import Contour, GridCell

STAGE = "s4_grid"


def resolve_grid(config: PipelineConfig, contour_count: int) -> tuple[int, int]:
    """
    Pick the grid size for this image

    Fixed policy uses config rows/cols. The adaptive policy switches between
    the large and small grid on the number of detected contours.

    Returns:
        (rows, cols)
    """
    if not config.adaptive_grid:
        return config.rows, config.cols

    if contour_count > config.adaptive_threshold:
        return tuple(config.adaptive_large_grid)
    return tuple(config.adaptive_small_grid)


def assign_to_grid(
    contours: list[Contour],
    width: int,
    height: int,
    rows: int,
    cols: int,
    logger: PipelineLogger,
) -> list[GridCell]:
    """
    Bucket contours into grid cells by their bounding box centre

    The last row and column absorb rounding overflow from the floored cell
    size.

    Returns:
        All rows * cols cells in row-major order, empty ones included
    """
    logger.log_info(f"Stage 4: Assigning {len(contours)} contours to {rows}x{cols} grid...")

    cell_w = max(1, width // cols)
    cell_h = max(1, height // rows)

    cells = [GridCell(row=r, col=c, cols=cols) for r in range(rows) for c in range(cols)]

    for contour in contours:
        cx, cy = contour.center
        col = min(math.floor(cx / cell_w), cols - 1)
        row = min(math.floor(cy / cell_h), rows - 1)
        cells[row * cols + col].contours.append(contour)

    occupancy = [[len(cells[r * cols + c].contours) for c in range(cols)] for r in range(rows)]
    non_empty = sum(1 for cell in cells if not cell.is_empty)

    logger.log_stage(
        STAGE,
        rows=rows,
        cols=cols,
        cell_size=[cell_w, cell_h],
        occupancy=occupancy,
        non_empty_cells=non_empty,
    )
    logger.log_info(f"  {non_empty}/{rows * cols} cells contain stickers")

    return cells
