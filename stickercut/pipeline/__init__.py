"""
Multi-Stage Sticker Sheet Cutting Pipeline
"""

from .pipeline import StickerPipeline, cut_stickers
from .logger import PipelineLogger
from .config import PipelineConfig
from .errors import DecodeError, FormatError, RegionError, StickerCutError
from .models import EncodedSticker

__all__ = [
    "StickerPipeline",
    "cut_stickers",
    "PipelineLogger",
    "PipelineConfig",
    "DecodeError",
    "FormatError",
    "RegionError",
    "StickerCutError",
    "EncodedSticker",
]
