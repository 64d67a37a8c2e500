"""
Data types passed between pipeline stages
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

# (x0, y0, x1, y1), right/bottom edges exclusive
Box = Tuple[int, int, int, int]


@dataclass(frozen=True, eq=False)
class RasterImage:
    """Decoded image, uint8 array of shape (H, W, C) in RGB(A) order"""

    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def channels(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]


@dataclass(frozen=True, eq=False)
class Contour:
    """Closed outer boundary of one foreground component, points as (x, y)"""

    points: np.ndarray

    @property
    def bbox(self) -> Box:
        xs = self.points[:, 0]
        ys = self.points[:, 1]
        return int(xs.min()), int(ys.min()), int(xs.max()) + 1, int(ys.max()) + 1

    @property
    def center(self) -> Tuple[float, float]:
        x0, y0, x1, y1 = self.bbox
        return x0 + (x1 - x0) / 2, y0 + (y1 - y0) / 2


@dataclass
class GridCell:
    """One rows x cols partition and the contours whose centre falls in it"""

    row: int
    col: int
    cols: int
    contours: List[Contour] = field(default_factory=list)

    @property
    def index(self) -> int:
        """Row-major position of this cell"""
        return self.row * self.cols + self.col

    @property
    def is_empty(self) -> bool:
        return not self.contours

    def union_bbox(self) -> Optional[Box]:
        """Bounding box enclosing every assigned contour"""
        if not self.contours:
            return None
        boxes = [c.bbox for c in self.contours]
        return (
            min(b[0] for b in boxes),
            min(b[1] for b in boxes),
            max(b[2] for b in boxes),
            max(b[3] for b in boxes),
        )


@dataclass
class StickerRegion:
    """Composited RGBA crop for one grid cell"""

    cell: GridCell
    box: Box
    rgba: np.ndarray
    mask: np.ndarray


@dataclass
class EncodedSticker:
    """Encoded output image for one grid cell"""

    row: int
    col: int
    index: int
    format: str
    data: bytes
