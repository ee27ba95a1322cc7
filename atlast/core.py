"""
Atlas build pipeline.

Runs the whole single-pass build: pack, composite, encode the metadata,
bundle both into an archive and write it atomically.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .archive import build_archive, write_archive
from .errors import AtlasError
from .images import SourceImage, load_images
from .layout import PackingOptions, PackingResult, pack_images, plan_canvas
from .logger import log_build_summary, log_image_collection, log_packing_calculation
from .records import AtlasRecord, build_records, encode_records
from .render import compose_atlas, encode_png


@dataclass
class AtlasBuild:
    """Everything produced by one build, held in memory until written."""
    result: PackingResult
    records: List[AtlasRecord]
    png_bytes: bytes
    data_bytes: bytes
    archive_bytes: bytes


class AtlasBuilder:
    """Main class driving a build from decoded images to archive bytes."""

    def __init__(self, options: Optional[PackingOptions] = None, legacy_data: bool = False):
        self.options = options or PackingOptions()
        self.legacy_data = legacy_data
        self.logger = logging.getLogger(__name__)

    def build(self, images: Sequence[SourceImage]) -> Optional[AtlasBuild]:
        """
        Pack and serialize ``images``.

        Returns:
            AtlasBuild, or None when there is nothing to pack
        """
        if not images:
            self.logger.info("No images to pack")
            return None

        print("Packing...")
        start = time.perf_counter()
        plan = plan_canvas(images)
        self.logger.debug(f"Canvas plan: width {plan.width}px, scan row limit {plan.scan_row_limit}")
        result = pack_images(images, plan, self.options)
        log_packing_calculation(result, time.perf_counter() - start)

        if result.canvas_width == 0 or result.canvas_height == 0:
            raise AtlasError(f"Packed canvas is empty ({result.canvas_width}x{result.canvas_height}); "
                             f"every input image has zero width or height")

        canvas = compose_atlas(result)
        png_bytes = encode_png(canvas)
        records = build_records(result)
        data_bytes = encode_records(records, legacy=self.legacy_data)
        archive_bytes = build_archive(png_bytes, data_bytes)

        return AtlasBuild(
            result=result,
            records=records,
            png_bytes=png_bytes,
            data_bytes=data_bytes,
            archive_bytes=archive_bytes,
        )

    def build_directory(self, folder_path: Path, output_path: Path) -> Optional[AtlasBuild]:
        """Build an atlas from every image in ``folder_path`` and write it to ``output_path``."""
        images = load_images(Path(folder_path))
        log_image_collection(folder_path, images)

        if not images:
            print("No images in directory")
            return None

        build = self.build(images)

        print("Writing...")
        write_archive(Path(output_path), build.archive_bytes)
        log_build_summary(output_path, len(build.png_bytes), len(build.data_bytes), len(build.archive_bytes))
        return build
