import math

import numpy as np
import pytest

from visiontools.corners import Corner, corners_fast9
from visiontools.oriented_fast import (
    OrientedFastCorner,
    intensity_centroid,
    oriented_fast,
)

RING = np.array(
    [
        [0, 0, 10, 10, 10, 0, 0],
        [0, 10, 0, 0, 0, 10, 0],
        [10, 0, 0, 0, 0, 0, 10],
        [10, 0, 0, 0, 0, 0, 10],
        [0, 0, 0, 0, 0, 0, 10],
        [0, 0, 0, 0, 0, 10, 0],
        [0, 0, 0, 10, 10, 0, 0],
    ],
    dtype=np.uint8,
)


def _noise(width, height, seed):
    return np.random.default_rng(seed).integers(0, 256, size=(height, width)).astype(np.uint8)


def test_intensity_centroid():
    expected = float(np.float32(-math.pi / 4))
    assert intensity_centroid(RING, 3, 3, 3) == expected


def test_intensity_centroid_uniform_patch_is_zero_angle():
    image = np.full((9, 9), 50, dtype=np.uint8)
    assert intensity_centroid(image, 4, 4, 2) == 0.0


def test_oriented_fast_single_corner():
    result = oriented_fast(RING, 0, 1, 0, 0xC0)
    assert len(result) == 1
    found = result[0]
    assert found.corner == Corner(3, 3, 9.0)
    assert found.orientation == pytest.approx(-math.pi / 4)


def test_oriented_fast_non_corner():
    image = np.zeros((7, 7), dtype=np.uint8)
    assert oriented_fast(image, 255, 0, 0, 0xC0) == []


def test_oriented_fast_zero_target_returns_nothing():
    assert oriented_fast(RING, 0, 0, 0, 0xC0) == []


def test_oriented_fast_keeps_strongest_corners():
    image = _noise(40, 40, 3)
    result = oriented_fast(image, 10, 5, 3, None)
    all_scores = sorted((c.score for c in corners_fast9(image, 10)), reverse=True)
    assert [r.corner.score for r in result] == all_scores[:5]
    assert all(isinstance(r, OrientedFastCorner) for r in result)


def test_oriented_fast_respects_edge_radius():
    image = _noise(40, 40, 5)
    result = oriented_fast(image, 5, 1000, 10, None)
    assert result
    for r in result:
        assert 10 <= r.corner.x < 30
        assert 10 <= r.corner.y < 30


def test_oriented_fast_sampled_threshold_is_deterministic_with_seed():
    image = _noise(40, 40, 11)
    first = oriented_fast(image, None, 10, 3, 42)
    second = oriented_fast(image, None, 10, 3, 42)
    assert first == second
    assert len(first) <= 10


def test_oriented_fast_edge_radius_too_large():
    with pytest.raises(ValueError):
        oriented_fast(RING, 0, 1, 4, 0)


def test_oriented_fast_sampling_needs_pixels():
    image = np.zeros((6, 6), dtype=np.uint8)
    with pytest.raises(ValueError):
        oriented_fast(image, None, 1, 3, 0)