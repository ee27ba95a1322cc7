from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from .archive import read_archive
from .core import AtlasBuilder
from .errors import (
    ArchiveReadError,
    ArchiveWriteError,
    AtlasError,
    ImageLoadError,
    PackingError,
    RecordFormatError,
)
from .layout import PackingOptions
from .logger import DEFAULT_LOG_FILE, setup_logging
from .records import decode_records
from .render import decode_png


def cli_build(args: argparse.Namespace) -> int:
    """Pack every image in the asset directory into one atlas archive."""

    logging.info("Starting build operation")
    logging.debug(f"Args: {vars(args)}")

    try:
        options = PackingOptions(
            collision=args.collision,
            bound_check=args.bound_check,
            max_scan_rows=args.max_scan_rows,
        )
    except ValueError as e:
        logging.error(f"Invalid packing options: {e}")
        print(f"Invalid packing options: {e}")
        return 1

    builder = AtlasBuilder(options, legacy_data=args.legacy_data)

    try:
        build = builder.build_directory(Path(args.asset_directory), Path(args.output_file))
    except ImageLoadError as e:
        logging.error(f"Error loading images: {e}")
        print(f"Error loading images: {e}")
        return 5
    except PackingError as e:
        logging.error(f"Error during packing: {e}")
        print(f"Error during packing: {e}")
        return 4
    except ArchiveWriteError as e:
        logging.error(f"Error writing archive: {e}")
        print(f"Error writing archive: {e}")
        return 5
    except AtlasError as e:
        logging.error(f"Build failed: {e}")
        print(f"Build failed: {e}")
        return 4

    if build is None:
        logging.info("Nothing to do")
        return 0

    print(f"Wrote atlas: {args.output_file} "
          f"({build.result.canvas_width}x{build.result.canvas_height}, {len(build.records)} images)")
    return 0


def cli_inspect(args: argparse.Namespace) -> int:
    """Show the canvas size and every record stored in an atlas archive."""
    try:
        png_bytes, data_bytes = read_archive(Path(args.atlas_file))
        canvas = decode_png(png_bytes)
        records = decode_records(data_bytes)
    except (ArchiveReadError, RecordFormatError) as e:
        logging.error(f"Error reading atlas: {e}")
        print(f"Error reading atlas: {e}")
        return 5

    height, width = canvas.shape[:2]
    print(f"Atlas: {args.atlas_file}")
    print(f"Canvas: {width}x{height} pixels")
    print(f"Records: {len(records)}")
    for record in records:
        print(f"  {record.name}: x={record.x:.6f} y={record.y:.6f} "
              f"w={record.width:.6f} h={record.height:.6f} "
              f"-> ({round(record.x * width)},{round(record.y * height)})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="atlast", description="Create texture atlases that last")
    p.add_argument("--log-file", default=DEFAULT_LOG_FILE, help=f"Debug log path (default: {DEFAULT_LOG_FILE})")
    sub = p.add_subparsers(dest="cmd")

    b = sub.add_parser("build", help="Pack a directory of PNG images into an atlas archive")
    b.add_argument("-d", "--asset-directory", default="./", metavar="DIR_NAME",
                   help="Directory searched recursively for .png files (default: ./)")
    b.add_argument("-o", "--output-file", default="output.atlas", metavar="FILE_NAME",
                   help="Output archive path (default: output.atlas)")

    # Packing controls
    b.add_argument("--collision", choices=["corner", "aabb"], default="corner",
                   help="Collision test: corner containment (default) or full AABB overlap")
    b.add_argument("--bound-check", choices=["height", "width"], default="height",
                   help="Right-edge bound: x+height (default, historical) or x+width. "
                        "With height, images taller than the widest image cannot be placed "
                        "and wide images placed to the right run past the canvas edge (exit 4)")
    b.add_argument("--max-scan-rows", type=int,
                   help="Give up on an image after scanning this many rows (default: derived from input)")
    b.add_argument("--legacy-data", action="store_true",
                   help="Write atlas.data without the magic/version header")
    b.set_defaults(func=cli_build)

    i = sub.add_parser("inspect", help="Show the contents of an atlas archive")
    i.add_argument("atlas_file", help="Atlas archive to inspect")
    i.set_defaults(func=cli_inspect)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging first
    setup_logging(args.log_file)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        result = args.func(args)
        logging.info(f"Operation completed with exit code: {result}")
        return result
    except Exception as e:
        logging.error(f"Unhandled exception: {e}", exc_info=True)
        print(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
