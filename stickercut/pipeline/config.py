"""
PipelineConfig: Configuration for the sticker cutting pipeline
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

SUPPORTED_FORMATS = ("WEBP", "PNG")
FEATHER_EDGE_MODES = ("transparent", "reflect")


@dataclass
class PipelineConfig:
    """Configuration for sticker cutting pipeline"""

    # Stage 1: Normalization (background fallback for RGB input)
    bg_seed_points: tuple[tuple[int, int], ...] = ((0, 0),)
    bg_tolerance: int = 10
    bg_connectivity: int = 4

    # Stage 2: Foreground mask
    morphology_kernel_size: int = 5

    # Stage 4: Grid assignment
    rows: int = 3
    cols: int = 3
    adaptive_grid: bool = False
    adaptive_threshold: int = 6  # More contours than this -> large grid
    adaptive_large_grid: tuple[int, int] = (3, 3)
    adaptive_small_grid: tuple[int, int] = (2, 2)

    # Stage 5: Compositing
    feather_px: int = 10
    feather_edge: str = "transparent"
    max_workers: int = 1

    # Stage 6: Output
    output_format: str = "WEBP"
    webp_quality: int = 100
    webp_lossless: bool = False
    output_dir: Optional[Path] = None

    def __post_init__(self):
        self.output_format = self.output_format.upper()
        self.feather_edge = self.feather_edge.lower()
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)

        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Grid must be at least 1x1, got {self.rows}x{self.cols}")
        for name, grid in (
            ("adaptive_large_grid", self.adaptive_large_grid),
            ("adaptive_small_grid", self.adaptive_small_grid),
        ):
            if len(grid) != 2 or min(grid) < 1:
                raise ValueError(f"{name} must be a (rows, cols) pair >= 1, got {grid}")
        if self.feather_px < 0:
            raise ValueError(f"feather_px must be >= 0, got {self.feather_px}")
        if self.feather_edge not in FEATHER_EDGE_MODES:
            raise ValueError(
                f"feather_edge must be one of {FEATHER_EDGE_MODES}, got {self.feather_edge!r}"
            )
        if self.morphology_kernel_size < 1:
            raise ValueError(
                f"morphology_kernel_size must be >= 1, got {self.morphology_kernel_size}"
            )
        if not 0 <= self.bg_tolerance <= 255:
            raise ValueError(f"bg_tolerance must be in 0..255, got {self.bg_tolerance}")
        if self.bg_connectivity not in (4, 8):
            raise ValueError(f"bg_connectivity must be 4 or 8, got {self.bg_connectivity}")
        if not self.bg_seed_points:
            raise ValueError("At least one background seed point is required")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.output_format not in SUPPORTED_FORMATS:
            raise ValueError(
                f"output_format must be one of {SUPPORTED_FORMATS}, got {self.output_format!r}"
            )
        if not 0 <= self.webp_quality <= 100:
            raise ValueError(f"webp_quality must be in 0..100, got {self.webp_quality}")

    @property
    def feather_kernel_size(self) -> int:
        """Odd Gaussian kernel size used for feathering"""
        return 2 * self.feather_px + 1

    @property
    def output_extension(self) -> str:
        """File extension matching the output format"""
        return "." + self.output_format.lower()
