"""Synthetic sticker sheets for tests"""

from io import BytesIO

import numpy as np
from PIL import Image

from stickercut.pipeline.models import Contour

COLORS = [
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
    (255, 255, 0),
    (255, 0, 255),
    (0, 255, 255),
    (128, 64, 0),
    (64, 0, 128),
    (0, 128, 64),
]


def grid_centers(size=300, rows=3, cols=3):
    """Centres of a rows x cols grid over a size x size image, row-major"""
    cell_w, cell_h = size // cols, size // rows
    return [
        (c * cell_w + cell_w // 2, r * cell_h + cell_h // 2)
        for r in range(rows)
        for c in range(cols)
    ]


def draw_square(pixels, center, side, color):
    cx, cy = center
    half = side // 2
    pixels[cy - half : cy + half, cx - half : cx + half, : len(color)] = color


def make_sheet(centers, size=300, side=40, colors=COLORS, background=None):
    """RGBA sheet (or RGB when background is given) with one square per centre"""
    if background is None:
        pixels = np.zeros((size, size, 4), dtype=np.uint8)
        colors = [tuple(c) + (255,) for c in colors]
    else:
        pixels = np.empty((size, size, 3), dtype=np.uint8)
        pixels[:, :] = background
    for center, color in zip(centers, colors):
        draw_square(pixels, center, side, color)
    return pixels


def encode_png(pixels) -> bytes:
    buf = BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


def decode(data: bytes) -> np.ndarray:
    with Image.open(BytesIO(data)) as img:
        return np.array(img.convert("RGBA"))


def box_contour(x0, y0, x1, y1) -> Contour:
    """Rectangle contour covering [x0, x1) x [y0, y1)"""
    return Contour(np.array([[x0, y0], [x1 - 1, y0], [x1 - 1, y1 - 1], [x0, y1 - 1]]))
