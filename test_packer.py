#!/usr/bin/env python3
"""
Test the next-fit scan packer against hand-traced placements and its
no-overlap and bounding properties.
"""
import random
import sys
from pathlib import Path

import pytest

# Add the project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from atlast.errors import PackingError
from atlast.images import SourceImage
from atlast.layout import (
    CanvasPlan,
    PackingOptions,
    order_for_packing,
    pack_images,
    plan_canvas,
)


def make_image(name, width, height, fill=0):
    return SourceImage(name, width, height, bytes([fill]) * (width * height * 4))


def scenario_images():
    return [make_image("a", 2, 2), make_image("b", 2, 2), make_image("c", 4, 4)]


def assert_no_corner_collisions(rects):
    for i, first in enumerate(rects):
        for j, second in enumerate(rects):
            if i != j:
                assert not first.intersects_corner_of(second), f"{first} holds a corner of {second}"


def test_order_is_area_descending_and_stable():
    images = [make_image("small", 1, 1), make_image("a", 2, 3), make_image("big", 5, 5),
              make_image("b", 3, 2), make_image("c", 6, 1)]
    assert [img.name for img in order_for_packing(images)] == ["big", "a", "b", "c", "small"]


def test_plan_canvas():
    plan = plan_canvas(scenario_images())
    assert plan.width == 4
    assert plan.scan_row_limit == (3 + 3 + 5) + 1
    assert plan_canvas([]).width == 0


def test_three_image_scenario():
    result = pack_images(scenario_images())

    assert result.names == ["c", "a", "b"]
    assert [(r.x, r.y) for r in result.rects] == [(0, 0), (0, 5), (0, 8)]
    assert result.canvas_width == 4
    assert result.canvas_height == 10
    assert_no_corner_collisions(result.rects)


def test_three_image_scenario_with_aabb_collision():
    result = pack_images(scenario_images(), options=PackingOptions(collision="aabb"))

    assert [(r.x, r.y) for r in result.rects] == [(0, 0), (0, 4), (2, 4)]
    assert result.canvas_height == 6
    rects = result.rects
    for i in range(len(rects)):
        for j in range(i + 1, len(rects)):
            assert not rects[i].overlaps(rects[j])


def test_identical_images_do_not_collide():
    images = [make_image(f"tile{i}", 3, 3) for i in range(8)]
    result = pack_images(images)

    assert result.names == [f"tile{i}" for i in range(8)]
    assert all(r.x == 0 for r in result.rects)
    assert [r.y for r in result.rects] == [4 * i for i in range(8)]
    assert_no_corner_collisions(result.rects)


def test_random_sizes_respect_scan_invariant_and_bounds():
    rnd = random.Random(1234)
    images = [make_image(f"img{i}", rnd.randint(1, 8), rnd.randint(1, 8)) for i in range(15)]
    result = pack_images(images, options=PackingOptions(bound_check="width"))

    rects = result.rects
    # every image is clear of the corners tested when it was placed; the
    # reverse direction can fail on touching edges
    for j, later in enumerate(rects):
        for earlier in rects[:j]:
            assert not earlier.intersects_corner_of(later)
    for r in rects:
        assert r.right <= result.canvas_width
    assert result.canvas_width == max(img.width for img in images)
    assert result.canvas_height == max(r.bottom for r in rects)


def test_mixed_sizes_under_default_options():
    """
    Seeded mixed-size sets under the default corner test and x+height bound.

    Only the earlier -> later direction is asserted: that is the test the scan
    makes. The reverse does not hold, because closed edges let a later rect
    touch an earlier one, e.g. Rect(2, 28, 5, 1) holds corner (4, 28) of
    Rect(4, 22, 2, 6) without any shared area. Sets the x+height bound cannot
    place must fail with PackingError naming one of their images.
    """
    packed = 0
    for seed in range(40):
        rnd = random.Random(seed)
        images = [make_image(f"s{i}", rnd.randint(1, 12), rnd.randint(1, 12)) for i in range(8)]
        try:
            result = pack_images(images)
        except PackingError as e:
            assert e.image_name in {img.name for img in images}
            continue

        packed += 1
        rects = result.rects
        for j, later in enumerate(rects):
            for earlier in rects[:j]:
                assert not earlier.intersects_corner_of(later), f"seed {seed}: {earlier} holds a corner of {later}"
        assert result.canvas_width == max(img.width for img in images)
        assert result.canvas_height == max(r.bottom for r in rects)
    assert packed > 0


def test_height_bound_quirk_places_past_the_canvas():
    images = [make_image("base", 4, 1), make_image("post", 1, 3), make_image("slab", 3, 1)]

    literal = pack_images(images)
    assert literal.names == ["base", "post", "slab"]
    assert [(r.x, r.y) for r in literal.rects] == [(0, 0), (0, 2), (2, 2)]
    assert literal.rects[2].right > literal.canvas_width

    corrected = pack_images(images, options=PackingOptions(bound_check="width"))
    assert [(r.x, r.y) for r in corrected.rects] == [(0, 0), (0, 2), (0, 6)]
    assert all(r.right <= corrected.canvas_width for r in corrected.rects)


def test_image_taller_than_canvas_hits_scan_cap():
    images = [make_image("bar", 4, 1), make_image("post", 1, 5)]

    with pytest.raises(PackingError) as excinfo:
        pack_images(images)
    assert excinfo.value.image_name == "post"

    corrected = pack_images(images, options=PackingOptions(bound_check="width"))
    assert [(r.x, r.y) for r in corrected.rects] == [(0, 0), (0, 6)]
    assert corrected.canvas_height == 7


def test_image_wider_than_canvas_is_rejected():
    with pytest.raises(PackingError) as excinfo:
        pack_images([make_image("wide", 4, 1)], plan=CanvasPlan(width=3, scan_row_limit=10))
    assert excinfo.value.image_name == "wide"


def test_max_scan_rows_override():
    with pytest.raises(PackingError) as excinfo:
        pack_images(scenario_images(), options=PackingOptions(max_scan_rows=3))
    assert excinfo.value.image_name == "a"


def test_invalid_options():
    with pytest.raises(ValueError):
        PackingOptions(collision="sat")
    with pytest.raises(ValueError):
        PackingOptions(bound_check="diagonal")
    with pytest.raises(ValueError):
        PackingOptions(max_scan_rows=0)


def test_empty_input():
    result = pack_images([])
    assert result.placements == []
    assert (result.canvas_width, result.canvas_height) == (0, 0)


if __name__ == "__main__":
    print("🧪 Testing packer")
    tests = [v for k, v in list(globals().items()) if k.startswith("test_")]
    for test in tests:
        test()
        print(f"✅ {test.__name__}")
