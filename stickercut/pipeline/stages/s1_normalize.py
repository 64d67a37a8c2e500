"""
Stage 1: Image Decoding and Normalization
"""

from io import BytesIO

import numpy as np
from PIL import Image, UnidentifiedImageError
from scipy import ndimage

from ..config import PipelineConfig
from ..errors import DecodeError, FormatError
from ..logger import PipelineLogger
from ..models import RasterImage

STAGE = "s1_normalize"


def decode_image(image_bytes: bytes) -> np.ndarray:
    """
    Decode raw bytes into a uint8 pixel array

    Palette images are expanded, CMYK/YCbCr become RGB. Every other mode keeps
    its native band count so the channel check in normalize_pixels sees it.

    Raises:
        DecodeError: If the bytes are not a readable image, or the header
            declares a size past the decompression bomb limit
        FormatError: If the samples are not 8-bit
    """
    if not image_bytes:
        raise DecodeError("Empty input")

    try:
        with Image.open(BytesIO(image_bytes)) as img:
            img.load()
            if img.mode in ("P", "PA"):
                has_alpha = img.mode == "PA" or "transparency" in img.info
                img = img.convert("RGBA" if has_alpha else "RGB")
            elif img.mode in ("CMYK", "YCbCr"):
                img = img.convert("RGB")
            pixels = np.array(img)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
        SyntaxError,
    ) as e:
        raise DecodeError(f"Invalid image data: {e}") from e

    if pixels.dtype != np.uint8:
        raise FormatError(f"Unsupported sample type {pixels.dtype}, expected 8-bit")

    return pixels


def _clamp_seed(seed: tuple[int, int], width: int, height: int) -> tuple[int, int]:
    """Negative coordinates count from the right/bottom edge, like indexing"""
    x, y = seed
    if x < 0:
        x += width
    if y < 0:
        y += height
    return min(max(x, 0), width - 1), min(max(y, 0), height - 1)


def remove_background(rgb: np.ndarray, config: PipelineConfig) -> np.ndarray:
    """
    Build an alpha channel for an image without transparency

    Flood fills from each seed point: a pixel is background-like when every
    channel is within bg_tolerance of the seed colour, and background when it
    is connected to the seed through background-like pixels.

    Args:
        rgb: RGB image (H, W, 3)
        config: Pipeline configuration

    Returns:
        Alpha channel (H, W), 0 = background, 255 = foreground
    """
    h, w = rgb.shape[:2]
    structure = ndimage.generate_binary_structure(
        2, 1 if config.bg_connectivity == 4 else 2
    )
    pixels = rgb.astype(np.int16)
    background = np.zeros((h, w), dtype=bool)

    for seed in config.bg_seed_points:
        x, y = _clamp_seed(seed, w, h)
        if background[y, x]:
            continue

        diff = np.abs(pixels - pixels[y, x])
        bg_like = np.all(diff <= config.bg_tolerance, axis=2)

        labels, _ = ndimage.label(bg_like, structure=structure)
        background |= labels == labels[y, x]

    return np.where(background, 0, 255).astype(np.uint8)


def normalize_pixels(
    pixels: np.ndarray, config: PipelineConfig, logger: PipelineLogger
) -> RasterImage:
    """
    Bring decoded pixels to an RGBA RasterImage

    Raises:
        FormatError: If the channel count is not 3 or 4
    """
    channels = 1 if pixels.ndim == 2 else pixels.shape[2]

    if channels == 4:
        logger.log_stage(
            STAGE,
            width=int(pixels.shape[1]),
            height=int(pixels.shape[0]),
            channels=4,
            background_fallback=False,
        )
        return RasterImage(pixels)

    if channels != 3:
        raise FormatError(
            f"Unsupported image format ({channels} channels), expected 3 or 4",
            channels=channels,
        )

    logger.log_info("  No alpha channel, removing background by flood fill...")
    alpha = remove_background(pixels, config)
    background_ratio = float(np.mean(alpha == 0))

    logger.log_stage(
        STAGE,
        width=int(pixels.shape[1]),
        height=int(pixels.shape[0]),
        channels=3,
        background_fallback=True,
        seed_points=[list(p) for p in config.bg_seed_points],
        tolerance=config.bg_tolerance,
        connectivity=config.bg_connectivity,
        background_ratio=background_ratio,
    )
    logger.log_info(f"  Background fallback marked {background_ratio:.1%} transparent")

    return RasterImage(np.dstack([pixels, alpha]))


def normalize_image(
    image_bytes: bytes, config: PipelineConfig, logger: PipelineLogger
) -> RasterImage:
    """
    Decode image bytes and normalize them to RGBA

    Args:
        image_bytes: Encoded input image
        config: Pipeline configuration
        logger: Logger instance

    Returns:
        RasterImage with 4 channels

    Raises:
        DecodeError: If the bytes are not a valid image
        FormatError: If the image has an unsupported channel count
    """
    logger.log_info("Stage 1: Decoding image...")

    pixels = decode_image(image_bytes)
    image = normalize_pixels(pixels, config, logger)

    logger.log_info(f"  Image size: {image.width}x{image.height}")
    return image
