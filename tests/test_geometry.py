"""Sensor space -> view space mapping.

The landscape-sensor / portrait-view case is the one that matters on phones:
the box must be rotated 90° clockwise, not just scaled per axis.
"""

import itertools
import math

import pytest

from scan_overlay.geometry import (
    Box,
    FrameDimensions,
    InvalidDimensions,
    Orientation,
    ViewLayout,
    map_boxes_to_view,
    map_to_view,
    needs_rotation,
    orientation_of,
)


def approx_box(box, expected):
    assert box.x == pytest.approx(expected.x)
    assert box.y == pytest.approx(expected.y)
    assert box.width == pytest.approx(expected.width)
    assert box.height == pytest.approx(expected.height)


def test_orientation():
    assert orientation_of(640, 480) is Orientation.LANDSCAPE
    assert orientation_of(480, 640) is Orientation.PORTRAIT
    assert orientation_of(500, 500) is Orientation.PORTRAIT
    assert FrameDimensions.placeholder().orientation is Orientation.PORTRAIT
    assert ViewLayout.unmeasured().orientation is Orientation.PORTRAIT


def test_needs_rotation():
    assert needs_rotation(FrameDimensions(640, 480), ViewLayout(0, 0, 480, 640))
    assert needs_rotation(FrameDimensions(480, 640), ViewLayout(0, 0, 640, 480))
    assert not needs_rotation(FrameDimensions(640, 480), ViewLayout(0, 0, 1280, 960))
    assert not needs_rotation(FrameDimensions(500, 500), ViewLayout(0, 0, 500, 500))


def test_landscape_sensor_in_portrait_view_is_rotated():
    frame = FrameDimensions(width=640, height=480)
    view = ViewLayout(x=0, y=0, width=480, height=640)
    box = Box(x=100, y=50, width=20, height=30)

    mapped = map_to_view(box, frame, view)

    # x' = (480 - 50 - 30) * 480/480, y' = 100 * 640/640, sides swapped
    approx_box(mapped, Box(x=400, y=100, width=30, height=20))


def test_landscape_sensor_in_smaller_portrait_view_scales_after_rotation():
    frame = FrameDimensions(width=640, height=480)
    view = ViewLayout(x=0, y=0, width=240, height=320)
    box = Box(x=100, y=50, width=20, height=30)

    approx_box(map_to_view(box, frame, view), Box(x=200, y=50, width=15, height=10))


def test_rotated_mapping_rejects_naive_and_swap_only_variants():
    frame = FrameDimensions(width=640, height=480)
    view = ViewLayout(x=0, y=0, width=480, height=640)
    box = Box(x=100, y=50, width=20, height=30)

    mapped = map_to_view(box, frame, view)

    naive = Box(x=100 * 480 / 640, y=50 * 640 / 480, width=20 * 480 / 640, height=30 * 640 / 480)
    swap_only = Box(x=50, y=100, width=30, height=20)
    assert mapped != naive
    assert mapped != swap_only


def test_rotated_box_corners_follow_clockwise_turn():
    # top-left corner of the sensor ends up at the top-right of the view
    frame = FrameDimensions(width=640, height=480)
    view = ViewLayout(x=0, y=0, width=480, height=640)
    mapped = map_to_view(Box(x=0, y=0, width=10, height=10), frame, view)
    assert mapped.x + mapped.width == pytest.approx(480)
    assert mapped.y == pytest.approx(0)


def test_portrait_sensor_in_landscape_view_uses_same_turn():
    frame = FrameDimensions(width=480, height=640)
    view = ViewLayout(x=0, y=0, width=640, height=480)
    box = Box(x=100, y=50, width=20, height=30)

    approx_box(map_to_view(box, frame, view), Box(x=560, y=100, width=30, height=20))


def test_aligned_orientation_scales_per_axis():
    frame = FrameDimensions(width=640, height=480)
    view = ViewLayout(x=0, y=0, width=1280, height=960)
    box = Box(x=100, y=50, width=20, height=30)

    approx_box(map_to_view(box, frame, view), Box(x=200, y=100, width=40, height=60))


@pytest.mark.parametrize("box", [
    Box(0, 0, 10, 10),
    Box(10, 20, 30, 40),
    Box(0, 0, 500, 500),
    Box(250.5, 100.25, 0, 0),
])
def test_square_frame_in_equal_view_is_identity(box):
    frame = FrameDimensions(width=500, height=500)
    view = ViewLayout(x=0, y=0, width=500, height=500)
    assert map_to_view(box, frame, view) == box


@pytest.mark.parametrize("frame", [
    FrameDimensions(640, 480),
    FrameDimensions(480, 640),
    FrameDimensions.placeholder(),
])
def test_unmeasured_view_gives_zero_size_box(frame):
    mapped = map_to_view(Box(x=10, y=10, width=5, height=7), frame, ViewLayout.unmeasured())
    assert mapped.width == 0
    assert mapped.height == 0


def test_placeholder_frame_is_valid_input():
    mapped = map_to_view(Box(0, 0, 1, 1), FrameDimensions.placeholder(), ViewLayout(0, 0, 100, 200))
    approx_box(mapped, Box(0, 0, 100, 200))


@pytest.mark.parametrize("frame", [
    FrameDimensions(0, 480),
    FrameDimensions(640, 0),
    FrameDimensions(-640, 480),
    FrameDimensions(float("nan"), 480),
    FrameDimensions(640, float("inf")),
])
def test_invalid_frame_dimensions_raise(frame):
    with pytest.raises(InvalidDimensions):
        map_to_view(Box(0, 0, 1, 1), frame, ViewLayout(0, 0, 480, 640))


def test_negative_view_raises():
    with pytest.raises(InvalidDimensions):
        map_to_view(Box(0, 0, 1, 1), FrameDimensions(640, 480), ViewLayout(0, 0, -1, 640))


@pytest.mark.parametrize("box", [
    Box(0, 0, -1, 1),
    Box(0, 0, 1, -1),
    Box(float("nan"), 0, 1, 1),
])
def test_invalid_box_raises(box):
    with pytest.raises(InvalidDimensions):
        map_to_view(box, FrameDimensions(640, 480), ViewLayout(0, 0, 480, 640))


def test_invalid_dimensions_is_value_error():
    assert issubclass(InvalidDimensions, ValueError)


def test_never_nan_or_inf_over_grid():
    frames = [FrameDimensions(w, h) for w, h in itertools.product([1, 3, 480, 640, 1920], repeat=2)]
    views = [ViewLayout(0, 0, w, h) for w, h in itertools.product([0, 1, 480, 640], repeat=2)]
    box = Box(x=1, y=1, width=2, height=2)
    for frame, view in itertools.product(frames, views):
        m = map_to_view(box, frame, view)
        assert all(math.isfinite(v) for v in (m.x, m.y, m.width, m.height)), (frame, view)
        assert m.width >= 0 and m.height >= 0


def test_map_boxes_to_view_matches_single_mapping():
    frame = FrameDimensions(640, 480)
    view = ViewLayout(0, 0, 240, 320)
    boxes = [Box(100, 50, 20, 30), Box(0, 0, 640, 480)]
    assert map_boxes_to_view(boxes, frame, view) == tuple(map_to_view(b, frame, view) for b in boxes)


def test_map_boxes_to_view_validates_empty_batch():
    assert map_boxes_to_view([], FrameDimensions(640, 480), ViewLayout(0, 0, 1, 1)) == ()
    with pytest.raises(InvalidDimensions):
        map_boxes_to_view([], FrameDimensions(0, 480), ViewLayout(0, 0, 1, 1))


def test_box_from_points():
    box = Box.from_points([[10, 20], [50, 22], [48, 70], [12, 68]])
    assert box == Box(x=10, y=20, width=40, height=50)


def test_box_from_points_empty():
    with pytest.raises(ValueError):
        Box.from_points([])


@pytest.mark.parametrize("box,frame", [
    (Box(1, 1, 2, 2), FrameDimensions(1e-310, 1e-310)),
    (Box(1e308, 1e308, 1e308, 1e308), FrameDimensions(1, 1)),
    (Box(0, 1e308, 1, 1e308), FrameDimensions(640, 480)),
])
def test_overflow_to_infinity_raises(box, frame):
    with pytest.raises(InvalidDimensions):
        map_to_view(box, frame, ViewLayout(0, 0, 480, 640))
    with pytest.raises(InvalidDimensions):
        map_boxes_to_view([box], frame, ViewLayout(0, 0, 480, 640))
