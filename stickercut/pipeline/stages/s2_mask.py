"""
Stage 2: Foreground Mask from Alpha
"""

import cv2
import numpy as np

from ..config import PipelineConfig
from ..logger import PipelineLogger
from ..models import RasterImage

STAGE = "s2_foreground_mask"


def threshold_and_open(alpha: np.ndarray, kernel_size: int) -> np.ndarray:
    """
    Binarize alpha (> 0 is foreground) and remove speckles

    Args:
        alpha: Alpha channel (H, W)
        kernel_size: Size of the elliptical structuring element

    Returns:
        Binary mask (255 = foreground, 0 = background)
    """
    binary = np.where(alpha > 0, 255, 0).astype(np.uint8)
    kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (kernel_size, kernel_size))
    return cv2.morphologyEx(binary, cv2.MORPH_OPEN, kernel)


def build_foreground_mask(
    image: RasterImage, config: PipelineConfig, logger: PipelineLogger
) -> np.ndarray:
    """
    Build the mask used to locate stickers

    Only used for contour finding; the final alpha of each sticker is rebuilt
    from its own crop in stage 5.
    """
    logger.log_info("Stage 2: Building foreground mask...")

    alpha = image.alpha
    mask = threshold_and_open(alpha, config.morphology_kernel_size)

    raw_pixels = int(np.count_nonzero(alpha))
    fg_pixels = int(np.count_nonzero(mask))
    noise_removed = raw_pixels - fg_pixels

    logger.log_stage(
        STAGE,
        method="threshold + opening",
        morphological_kernel=f"MORPH_ELLIPSE ({config.morphology_kernel_size}x{config.morphology_kernel_size})",
        alpha_pixels=raw_pixels,
        foreground_pixels=fg_pixels,
        noise_pixels_removed=noise_removed,
    )
    logger.log_info(f"  Morphological opening removed {noise_removed:,} noise pixels")

    return mask
