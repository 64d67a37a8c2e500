"""
Sticker sheet cutter: one feathered transparent image per object on a grid
"""

__version__ = "0.1.0"
