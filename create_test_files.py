#!/usr/bin/env python3
"""
Create sample sprite folders for atlast.

Each scenario is a directory of small RGBA PNGs in assorted sizes, ready for
``python pack_atlas.py build -d test_scenarios/<name> --bound-check width``.
"""

import random
from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

COLORS = [(230, 25, 75), (60, 180, 75), (255, 225, 25), (0, 130, 200),
          (245, 130, 48), (145, 30, 180), (70, 240, 240), (240, 50, 230)]


def create_sprite(path: Path, width: int, height: int, seed: int = 0) -> np.ndarray:
    """
    Write a width x height RGBA PNG with random pixels and a border.

    Alpha varies per pixel so compositing bugs that touch the alpha channel
    show up in comparisons.

    Returns:
        The RGBA array that was written
    """
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    img = Image.fromarray(pixels)
    if width > 2 and height > 2:
        draw = ImageDraw.Draw(img)
        draw.rectangle([0, 0, width - 1, height - 1], outline=COLORS[seed % len(COLORS)] + (255,))
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path)
    return np.asarray(img, dtype=np.uint8)


def create_test_scenario(root: Path, name: str, sizes: Sequence[Tuple[int, int]]) -> Tuple[Path, List[Path]]:
    """Create ``root/name`` holding one sprite per (width, height) in ``sizes``."""
    scenario_dir = Path(root) / name
    scenario_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for i, (width, height) in enumerate(sizes):
        img_path = scenario_dir / f"sprite_{i + 1:03d}_{width}x{height}.png"
        create_sprite(img_path, width, height, seed=i)
        paths.append(img_path)

    print(f"Created scenario '{name}': {len(paths)} images in {scenario_dir}")
    return scenario_dir, paths


def random_sizes(count: int, min_side: int, max_side: int, seed: int = 0) -> List[Tuple[int, int]]:
    rnd = random.Random(seed)
    return [(rnd.randint(min_side, max_side), rnd.randint(min_side, max_side)) for _ in range(count)]


SCENARIOS = [
    ("readme_example", [(2, 2), (2, 2), (4, 4)]),
    ("uniform_tiles", [(16, 16)] * 12),
    ("mixed_sprites", random_sizes(20, 4, 32, seed=7)),
    ("icons", random_sizes(60, 8, 24, seed=11)),
]

# Mixed sizes need the x+width bound; the default x+height bound rejects
# sprites taller than the widest one.
BUILD_ARGS = ["build", "-d", "test_scenarios/mixed_sprites", "-o", "mixed.atlas", "--bound-check", "width"]


def main():
    """Create all test scenarios."""
    print("atlast - Test File Generator")
    print("=" * 50)

    root = Path("test_scenarios")
    total_images = 0
    for name, sizes in SCENARIOS:
        create_test_scenario(root, name, sizes)
        total_images += len(sizes)

    print(f"\n{'='*50}")
    print(f"Total images created: {total_images}")
    print("To build an atlas:")
    print(f"  python pack_atlas.py {' '.join(BUILD_ARGS)}")


if __name__ == "__main__":
    main()
