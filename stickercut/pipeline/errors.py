"""
Pipeline errors

DecodeError and FormatError abort a run. RegionError only drops the grid
cell it was raised for.
"""

from typing import Optional, Tuple


class StickerCutError(Exception):
    """Base class for all pipeline errors"""


class DecodeError(StickerCutError):
    """Input bytes could not be decoded as an image"""


class FormatError(StickerCutError):
    """Decoded image has an unsupported channel layout"""

    def __init__(self, message: str, channels: Optional[int] = None):
        super().__init__(message)
        self.channels = channels


class RegionError(StickerCutError):
    """A single grid cell failed to composite or encode"""

    def __init__(self, message: str, cell: Optional[Tuple[int, int]] = None):
        super().__init__(message)
        self.cell = cell
