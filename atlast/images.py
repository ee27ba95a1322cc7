"""
Image discovery and decoding.

Walks an asset folder for PNG files and decodes each one into an RGBA8
``SourceImage`` that the packer and compositor work from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from PIL import Image, UnidentifiedImageError

from .errors import ImageLoadError

SUPPORTED_SUFFIXES = {'.png'}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceImage:
    """A decoded input image: RGBA, 8 bits per channel, row-major."""
    name: str
    width: int
    height: int
    pixels: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Negative dimensions for {self.name}: {self.width}x{self.height}")
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(f"Pixel buffer for {self.name} has {len(self.pixels)} bytes, "
                             f"expected {expected} ({self.width}x{self.height} RGBA)")

    @property
    def area(self) -> int:
        return self.width * self.height

    @classmethod
    def from_pil(cls, name: str, img: Image.Image) -> SourceImage:
        rgba = img.convert("RGBA")
        return cls(name=name, width=rgba.width, height=rgba.height, pixels=rgba.tobytes())


def find_image_files(folder_path: Path) -> List[Path]:
    """
    Return every PNG below ``folder_path``, recursively.

    Files are sorted by their path relative to the folder so the same tree
    always yields the same sequence.
    """
    folder_path = Path(folder_path)
    if not folder_path.exists() or not folder_path.is_dir():
        raise ImageLoadError(f"Folder does not exist: {folder_path}")

    image_files = [
        path for path in folder_path.rglob("*")
        if path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES
    ]
    image_files.sort(key=lambda p: p.relative_to(folder_path).as_posix())
    return image_files


def load_image(file_path: Path) -> SourceImage:
    """Decode one file into a ``SourceImage`` named after the file stem."""
    file_path = Path(file_path)
    try:
        with Image.open(file_path) as img:
            return SourceImage.from_pil(file_path.stem, img)
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError, ValueError) as e:
        raise ImageLoadError(f"Cannot read image: {file_path} - {e}") from e


def load_images(folder_path: Path) -> List[SourceImage]:
    """Discover and decode every image in ``folder_path``; any failure aborts."""
    images = []
    for file_path in find_image_files(folder_path):
        print(f"adding {file_path}")
        image = load_image(file_path)
        logger.debug(f"Loaded {file_path}: {image.width}x{image.height}")
        images.append(image)
    return images
