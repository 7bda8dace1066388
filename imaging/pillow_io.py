"""
Pillow-backed image loader and writer.
Converts between raster image files and RGB pixel grids.
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from evolution.errors import ImageLoadError, SnapshotWriteError
from evolution.genome import Genome
from evolution.interfaces import ImageLoader, ImageWriter, PathLike

logger = logging.getLogger(__name__)


class PillowImageLoader(ImageLoader):
    """Reads any Pillow-supported image as an opaque RGB grid."""

    def load(self, path: PathLike) -> np.ndarray:
        path = Path(path)
        if not path.is_file():
            raise ImageLoadError(str(path), "file not found")
        try:
            with Image.open(path) as image:
                pixels = np.asarray(image.convert("RGB"), dtype=np.uint8)
        except (UnidentifiedImageError, OSError) as e:
            raise ImageLoadError(str(path), str(e)) from e

        logger.info(f"Loaded {path} ({pixels.shape[1]}x{pixels.shape[0]})")
        return pixels


class PillowImageWriter(ImageWriter):
    """Writes RGB grids; the format follows the file extension."""

    def write(self, pixels: np.ndarray, path: PathLike) -> Path:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            image = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
            image.save(path)
        except (OSError, ValueError, KeyError) as e:
            raise SnapshotWriteError(str(path), str(e)) from e
        return path


def load_target(path: PathLike, loader: Optional[ImageLoader] = None) -> Genome:
    """Load the image every genome is scored against."""
    loader = loader or PillowImageLoader()
    return Genome.from_pixels(loader.load(path))
