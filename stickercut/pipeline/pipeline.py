"""
StickerPipeline: Main orchestration class
"""

from pathlib import Path
from typing import Optional

from .config import PipelineConfig
from .errors import DecodeError, FormatError
from .logger import PipelineLogger
from .models import EncodedSticker
from .stages import (
    assign_to_grid,
    build_foreground_mask,
    composite_regions,
    encode_regions,
    extract_contours,
    normalize_image,
    resolve_grid,
)


class StickerPipeline:
    """
    Multi-stage sticker sheet cutter

    Stages:
    1. Decode + Normalize (flood fill background fallback for RGB input)
    2. Foreground Mask (alpha threshold + opening)
    3. Contour Extraction (external contours)
    4. Grid Assignment (centroid bucketing)
    5. Region Compositing (crop, local mask, feather, premultiply)
    6. Encoding

    Decode and format errors abort the run; region errors drop one cell.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        self.config = config or PipelineConfig()
        self.logger = logger or PipelineLogger()

    def process_bytes(
        self, image_bytes: bytes, source: str = "<bytes>"
    ) -> list[EncodedSticker]:
        """
        Cut one sticker sheet into encoded stickers

        Args:
            image_bytes: Encoded input image
            source: Label used in the image log

        Returns:
            Stickers in row-major cell order, one per non-empty cell

        Raises:
            DecodeError: If the input is not an image
            FormatError: If the image is not 3 or 4 channel
        """
        self.logger.start_image(source)
        self.logger.log_info(f"Processing: {source}")

        try:
            image = normalize_image(image_bytes, self.config, self.logger)
            mask = build_foreground_mask(image, self.config, self.logger)
            contours = extract_contours(mask, self.logger)

            rows, cols = resolve_grid(self.config, len(contours))
            cells = assign_to_grid(
                contours, image.width, image.height, rows, cols, self.logger
            )

            regions = composite_regions(image, cells, self.config, self.logger)
            stickers = encode_regions(regions, self.config, self.logger)

        except (DecodeError, FormatError) as e:
            self.logger.log_error(f"Pipeline failed: {e}")
            self.logger.save_image_log()
            raise
        except Exception as e:
            self.logger.log_error(f"Pipeline failed: {e}", exc_info=True)
            self.logger.save_image_log()
            raise

        self.logger.log_info(f"  Produced {len(stickers)} stickers")
        self.logger.save_image_log()

        return stickers

    def process(self, input_path: Path) -> list[Path]:
        """
        Cut a sticker sheet file and write each sticker next to it

        Args:
            input_path: Path to input image

        Returns:
            Paths of the written stickers

        Raises:
            FileNotFoundError: If input doesn't exist
        """
        if not input_path.exists():
            raise FileNotFoundError(f"Input image not found: {input_path}")

        stickers = self.process_bytes(input_path.read_bytes(), source=str(input_path))

        output_dir = self.config.output_dir or input_path.parent
        output_dir.mkdir(parents=True, exist_ok=True)

        paths = []
        for sticker in stickers:
            path = output_dir / self._sticker_name(input_path, sticker)
            path.write_bytes(sticker.data)
            paths.append(path)

        self.logger.log_info(f"  Saved {len(paths)} stickers → {output_dir}")
        return paths

    def _sticker_name(self, input_path: Path, sticker: EncodedSticker) -> str:
        return f"{input_path.stem}_sticker_{sticker.index + 1}{self.config.output_extension}"


def cut_stickers(
    image_bytes: bytes,
    config: Optional[PipelineConfig] = None,
    logger: Optional[PipelineLogger] = None,
) -> list[bytes]:
    """Run the pipeline on raw bytes and return the encoded stickers"""
    pipeline = StickerPipeline(config=config, logger=logger)
    return [sticker.data for sticker in pipeline.process_bytes(image_bytes)]
