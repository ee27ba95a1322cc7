"""
Logging utilities for atlast.

Handles console/debug-file logging setup and the build progress summaries.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

DEFAULT_LOG_FILE = "atlast_debug.log"


def setup_logging(log_file: Optional[str] = DEFAULT_LOG_FILE) -> None:
    """Setup logging to both file and console."""
    # Create logger
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    logger.handlers.clear()

    # File handler - detailed logs
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s')
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # Console handler - important messages only
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_formatter = logging.Formatter('%(levelname)s: %(message)s')
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    logging.info(f"Logging initialized. Debug log: {log_file or 'disabled'}")


def log_image_collection(folder: Path, images: Sequence) -> None:
    """
    Log what was discovered in the asset folder.

    Args:
        folder: Folder that was scanned
        images: Decoded SourceImage objects
    """
    logger = logging.getLogger(__name__)

    logger.info(f"Image collection for '{folder}':")
    logger.info(f"  Images found: {len(images)}")
    if images:
        widest = max(images, key=lambda img: img.width)
        logger.info(f"  Widest image: {widest.name} ({widest.width}px)")
        logger.info(f"  Total pixel area: {sum(img.area for img in images):,}")


def log_packing_calculation(packing_result, calculation_time: float) -> None:
    """
    Log packing calculation results.

    Args:
        packing_result: PackingResult object
        calculation_time: Time taken for calculation
    """
    logger = logging.getLogger(__name__)

    canvas_area = packing_result.canvas_width * packing_result.canvas_height
    used_area = sum(rect.area for rect in packing_result.rects)
    efficiency = used_area / canvas_area if canvas_area else 0.0

    logger.info("Packing Calculation:")
    logger.info(f"  Canvas: {packing_result.canvas_width}x{packing_result.canvas_height} pixels")
    logger.info(f"  Images placed: {len(packing_result.placements)}")
    logger.info(f"  Efficiency: {efficiency:.1%}")
    logger.info(f"  Calculation time: {calculation_time:.3f} seconds")


def log_build_summary(output_path: Path, png_size: int, data_size: int, archive_size: int) -> None:
    logger = logging.getLogger(__name__)

    logger.info(f"Atlas written: {output_path}")
    logger.info(f"  atlas.png: {png_size:,} bytes")
    logger.info(f"  atlas.data: {data_size:,} bytes")
    logger.info(f"  Archive: {archive_size:,} bytes")
