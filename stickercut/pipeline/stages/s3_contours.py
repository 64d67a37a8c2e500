"""
Stage 3: External Contour Extraction
"""

import cv2
import numpy as np

from ..logger import PipelineLogger
from ..models import Contour

STAGE = "s3_contours"


def extract_contours(mask: np.ndarray, logger: PipelineLogger) -> list[Contour]:
    """
    Find the outer boundary of every foreground blob

    Holes are not returned; they survive through the per-region alpha in
    stage 5.

    Args:
        mask: Binary mask (255 = foreground)
        logger: Logger instance

    Returns:
        Contours sorted by bounding box origin (top to bottom, left to right)
    """
    logger.log_info("Stage 3: Extracting contours...")

    found, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    contours = [Contour(c.reshape(-1, 2).astype(np.int32)) for c in found]
    contours.sort(key=lambda c: (c.bbox[1], c.bbox[0]))

    logger.log_stage(
        STAGE,
        method="findContours (RETR_EXTERNAL, CHAIN_APPROX_SIMPLE)",
        num_contours=len(contours),
        bboxes=[list(c.bbox) for c in contours],
    )
    logger.log_info(f"  Found {len(contours)} foreground blobs")

    return contours
