from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence

from .errors import PackingError
from .geometry import Rect
from .images import SourceImage

Collision = Literal["corner", "aabb"]
BoundCheck = Literal["height", "width"]


@dataclass(frozen=True)
class CanvasPlan:
    """Sizing pass output: fixed canvas width and the scan-row cap."""
    width: int
    scan_row_limit: int


@dataclass
class PackingOptions:
    """Configuration for the placement pass."""
    collision: Collision = "corner"  # "aabb" is the full overlap test
    bound_check: BoundCheck = "height"  # "width" is the corrected bound
    max_scan_rows: Optional[int] = None  # overrides CanvasPlan.scan_row_limit

    def __post_init__(self) -> None:
        if self.collision not in ("corner", "aabb"):
            raise ValueError(f"Unknown collision test: {self.collision}")
        if self.bound_check not in ("height", "width"):
            raise ValueError(f"Unknown bound check: {self.bound_check}")
        if self.max_scan_rows is not None and self.max_scan_rows < 1:
            raise ValueError(f"max_scan_rows must be positive, got {self.max_scan_rows}")


@dataclass(frozen=True)
class Placement:
    image: SourceImage
    rect: Rect


@dataclass
class PackingResult:
    canvas_width: int
    canvas_height: int
    placements: List[Placement]

    @property
    def rects(self) -> List[Rect]:
        return [p.rect for p in self.placements]

    @property
    def names(self) -> List[str]:
        return [p.image.name for p in self.placements]


def plan_canvas(images: Sequence[SourceImage]) -> CanvasPlan:
    """
    Sizing pass, run once over the whole input set before any placement.

    The canvas width is the widest image. The row cap is one past the sum of
    every image height plus one: under the width bound any image fits at x=0
    one row below everything placed so far, so no successful scan can pass it.
    """
    width = max((img.width for img in images), default=0)
    scan_row_limit = sum(img.height + 1 for img in images) + 1
    return CanvasPlan(width=width, scan_row_limit=scan_row_limit)


def order_for_packing(images: Sequence[SourceImage]) -> List[SourceImage]:
    """Largest area first; equal areas keep their input order."""
    return sorted(images, key=lambda img: img.area, reverse=True)


def _collides(candidate: Rect, placed: Sequence[Rect], canvas_width: int, options: PackingOptions) -> bool:
    if options.bound_check == "height":
        extent = candidate.x + candidate.height
    else:
        extent = candidate.x + candidate.width
    if extent > canvas_width:
        return True

    if options.collision == "aabb":
        return any(rect.overlaps(candidate) for rect in placed)
    return any(rect.intersects_corner_of(candidate) for rect in placed)


def next_slot(
    image: SourceImage,
    placed: Sequence[Rect],
    canvas_width: int,
    scan_row_limit: int,
    options: Optional[PackingOptions] = None,
) -> Rect:
    """
    Scan left to right, top to bottom from (0, 0) one pixel at a time and
    return the first position that collides with nothing already placed.
    """
    options = options or PackingOptions()

    if image.width > canvas_width:
        raise PackingError(image.name, f"image is wider than the canvas ({image.width} > {canvas_width})")

    x, y = 0, 0
    candidate = Rect(x, y, image.width, image.height)
    while _collides(candidate, placed, canvas_width, options):
        if x >= canvas_width - 1:
            x = 0
            y += 1
            if y >= scan_row_limit:
                raise PackingError(image.name, f"no free slot within {scan_row_limit} scan rows "
                                               f"({image.width}x{image.height} on a {canvas_width}px wide canvas)")
        else:
            x += 1
        candidate = Rect(x, y, image.width, image.height)

    return candidate


def pack_images(
    images: Sequence[SourceImage],
    plan: Optional[CanvasPlan] = None,
    options: Optional[PackingOptions] = None,
) -> PackingResult:
    """
    Placement pass: place every image in area-descending order.

    Args:
        images: Decoded source images in discovery order
        plan: Sizing pass result; computed from ``images`` when omitted
        options: Collision and bound-check configuration

    Returns:
        PackingResult whose placements follow the packing order
    """
    options = options or PackingOptions()
    plan = plan or plan_canvas(images)
    scan_row_limit = options.max_scan_rows or plan.scan_row_limit

    logging.info(f"Packing {len(images)} images on a {plan.width}px wide canvas "
                 f"(collision={options.collision}, bound={options.bound_check})")

    placements: List[Placement] = []
    placed: List[Rect] = []
    for image in order_for_packing(images):
        rect = next_slot(image, placed, plan.width, scan_row_limit, options)
        logging.debug(f"Placed {image.name} ({image.width}x{image.height}) at ({rect.x},{rect.y})")
        if rect.right > plan.width:
            logging.warning(f"{image.name} at ({rect.x},{rect.y}) extends past the {plan.width}px canvas; "
                            f"the height bound check allows this, bound_check='width' does not")
        placed.append(rect)
        placements.append(Placement(image, rect))

    canvas_height = max((rect.bottom for rect in placed), default=0)
    return PackingResult(canvas_width=plan.width, canvas_height=canvas_height, placements=placements)
