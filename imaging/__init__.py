"""
Image input/output for pixel-evolve.
"""

from .pillow_io import PillowImageLoader, PillowImageWriter, load_target

__all__ = ["PillowImageLoader", "PillowImageWriter", "load_target"]
