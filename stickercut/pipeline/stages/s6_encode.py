"""
Stage 6: Encoding Composited Regions
"""

from io import BytesIO

from PIL import Image

from ..config import PipelineConfig
from ..errors import RegionError
from ..logger import PipelineLogger
from ..models import EncodedSticker, StickerRegion

STAGE = "s6_encode"


def encode_region(region: StickerRegion, config: PipelineConfig) -> EncodedSticker:
    """
    Encode an RGBA region into the configured alpha-capable format

    Raises:
        RegionError: If the encoder rejects the region
    """
    cell = region.cell
    if config.output_format == "WEBP":
        save_kwargs = {
            "quality": config.webp_quality,
            "lossless": config.webp_lossless,
            "exact": True,
        }
    else:
        save_kwargs = {"optimize": True}

    try:
        img = Image.fromarray(region.rgba)
        buf = BytesIO()
        img.save(buf, format=config.output_format, **save_kwargs)
    except (OSError, ValueError, TypeError) as e:
        raise RegionError(f"Encoding failed: {e}", cell=(cell.row, cell.col)) from e

    return EncodedSticker(
        row=cell.row,
        col=cell.col,
        index=cell.index,
        format=config.output_format,
        data=buf.getvalue(),
    )


def encode_regions(
    regions: list[StickerRegion], config: PipelineConfig, logger: PipelineLogger
) -> list[EncodedSticker]:
    """Encode regions in order, skipping any that fail"""
    logger.log_info(f"Stage 6: Encoding {len(regions)} stickers as {config.output_format}...")

    stickers = []
    for region in regions:
        try:
            stickers.append(encode_region(region, config))
        except RegionError as e:
            logger.log_region_error(STAGE, e.cell, str(e))

    logger.log_stage(
        STAGE,
        format=config.output_format,
        encoded=len(stickers),
        skipped=len(regions) - len(stickers),
        sizes=[len(s.data) for s in stickers],
    )

    return stickers
