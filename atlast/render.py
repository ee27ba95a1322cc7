from __future__ import annotations

import io
import logging

import numpy as np
from PIL import Image

from .errors import CompositionError
from .layout import PackingResult


def compose_atlas(result: PackingResult) -> np.ndarray:
    """
    Blit every placed image into one zeroed RGBA buffer.

    Pixels are copied verbatim, all four channels, with no blending. Anything
    not covered by a placement stays transparent black.

    Returns:
        uint8 array of shape (canvas_height, canvas_width, 4)
    """
    width, height = result.canvas_width, result.canvas_height
    logging.info(f"Starting raster composition with {len(result.placements)} placements")
    logging.debug(f"Canvas: {width}x{height} pixels, {width * height * 4:,} bytes")

    canvas = np.zeros((height, width, 4), dtype=np.uint8)

    for idx, pl in enumerate(result.placements):
        image, rect = pl.image, pl.rect
        if rect.width != image.width or rect.height != image.height:
            raise CompositionError(f"Placement {idx} for {image.name} is {rect.width}x{rect.height} "
                                   f"but the image is {image.width}x{image.height}")
        if rect.x < 0 or rect.y < 0 or rect.right > width or rect.bottom > height:
            raise CompositionError(f"Placement {idx} for {image.name} at ({rect.x},{rect.y}) "
                                   f"size {rect.width}x{rect.height} exceeds canvas {width}x{height}")
        if rect.area == 0:
            continue

        src = np.frombuffer(image.pixels, dtype=np.uint8).reshape(image.height, image.width, 4)
        canvas[rect.y:rect.bottom, rect.x:rect.right, :] = src
        logging.debug(f"Blitted {image.name} at ({rect.x},{rect.y})")

    return canvas


def encode_png(canvas: np.ndarray) -> bytes:
    """Encode an RGBA canvas as a lossless PNG."""
    if canvas.ndim != 3 or canvas.shape[2] != 4 or canvas.dtype != np.uint8:
        raise CompositionError(f"Expected an RGBA uint8 canvas, got shape {canvas.shape} dtype {canvas.dtype}")

    img = Image.fromarray(np.ascontiguousarray(canvas))
    with io.BytesIO() as buf:
        img.save(buf, format="PNG")
        return buf.getvalue()


def decode_png(data: bytes) -> np.ndarray:
    """Decode PNG bytes back into an RGBA uint8 array."""
    with Image.open(io.BytesIO(data)) as img:
        return np.asarray(img.convert("RGBA"), dtype=np.uint8)
