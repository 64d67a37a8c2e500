"""
Pipeline Stages
"""

from .s1_normalize import normalize_image
from .s2_mask import build_foreground_mask
from .s3_contours import extract_contours
from .s4_grid import assign_to_grid, resolve_grid
from .s5_composite import composite_regions
from .s6_encode import encode_regions

__all__ = [
    "normalize_image",
    "build_foreground_mask",
    "extract_contours",
    "resolve_grid",
    "assign_to_grid",
    "composite_regions",
    "encode_regions",
]
