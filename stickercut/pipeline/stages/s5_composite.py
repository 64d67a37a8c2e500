"""
Stage 5: Region Compositing (crop, local mask, feather, premultiply)
"""

from concurrent.futures import ThreadPoolExecutor

import cv2
import numpy as np

from ..config import PipelineConfig
from ..errors import RegionError
from ..logger import PipelineLogger
from ..models import GridCell, RasterImage, StickerRegion
from .s2_mask import threshold_and_open

_BORDER_TYPES = {
    "transparent": cv2.BORDER_CONSTANT,
    "reflect": cv2.BORDER_REFLECT_101,
}

STAGE = "s5_composite"


def feather_mask(mask: np.ndarray, config: PipelineConfig) -> np.ndarray:
    """
    Soften mask edges with a Gaussian blur of size 2 * feather_px + 1

    With the "transparent" edge mode, pixels beyond the crop count as 0 so
    objects touching their bounding box still fade out.
    """
    if config.feather_px == 0:
        return mask.copy()

    k = config.feather_kernel_size
    return cv2.GaussianBlur(
        mask, (k, k), 0, borderType=_BORDER_TYPES[config.feather_edge]
    )


def premultiply(rgb: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Scale colour channels by coverage to avoid fringes at the feathered edge"""
    coverage = mask.astype(np.float32) / 255.0
    faded = rgb.astype(np.float32) * coverage[:, :, None]
    return np.clip(np.rint(faded), 0, 255).astype(np.uint8)


def composite_region(
    image: RasterImage, cell: GridCell, config: PipelineConfig
) -> StickerRegion:
    """
    Build one feathered RGBA sticker from a grid cell

    Steps:
    1. Union bounding box of the cell's contours
    2. Crop the original image to it
    3. Rebuild a binary mask from the crop's own alpha (keeps holes)
    4. Feather the mask
    5. Premultiply colour by the feathered mask
    6. Stack faded colour with the feathered mask as alpha

    Raises:
        RegionError: If the cell is empty, the crop is degenerate or OpenCV fails
    """
    cell_id = (cell.row, cell.col)

    box = cell.union_bbox()
    if box is None:
        raise RegionError("Cell has no contours", cell=cell_id)

    x0, y0, x1, y1 = box
    x0, y0 = max(x0, 0), max(y0, 0)
    x1, y1 = min(x1, image.width), min(y1, image.height)
    if x1 <= x0 or y1 <= y0:
        raise RegionError(f"Zero-area crop {box}", cell=cell_id)

    crop = image.pixels[y0:y1, x0:x1]

    try:
        local_mask = threshold_and_open(crop[:, :, 3], config.morphology_kernel_size)
        feathered = feather_mask(local_mask, config)
        faded = premultiply(crop[:, :, :3], feathered)
    except cv2.error as e:
        raise RegionError(f"Compositing failed: {e}", cell=cell_id) from e

    rgba = np.dstack([faded, feathered])
    return StickerRegion(cell=cell, box=(x0, y0, x1, y1), rgba=rgba, mask=feathered)


def composite_regions(
    image: RasterImage,
    cells: list[GridCell],
    config: PipelineConfig,
    logger: PipelineLogger,
) -> list[StickerRegion]:
    """
    Composite every non-empty cell, skipping cells that fail

    Cells only read the shared image, so they can run on a thread pool. The
    result keeps row-major order regardless of worker count.

    Returns:
        One StickerRegion per successfully composited non-empty cell
    """
    targets = [cell for cell in cells if not cell.is_empty]
    logger.log_info(
        f"Stage 5: Compositing {len(targets)} regions (feather={config.feather_px}px)..."
    )

    def run(cell: GridCell):
        try:
            return composite_region(image, cell, config)
        except RegionError as e:
            return e

    if config.max_workers > 1 and len(targets) > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            outcomes = list(pool.map(run, targets))
    else:
        outcomes = [run(cell) for cell in targets]

    regions = []
    for outcome in outcomes:
        if isinstance(outcome, RegionError):
            logger.log_region_error(STAGE, outcome.cell, str(outcome))
            continue
        regions.append(outcome)

    logger.log_stage(
        STAGE,
        feather_px=config.feather_px,
        kernel_size=config.feather_kernel_size,
        feather_edge=config.feather_edge,
        workers=config.max_workers,
        regions=[
            {"cell": [r.cell.row, r.cell.col], "box": list(r.box)} for r in regions
        ],
        skipped=len(targets) - len(regions),
    )

    return regions
