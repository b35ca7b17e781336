"""Oriented FAST corners: FAST-9 corners with an intensity-centroid orientation.

Images are two-dimensional arrays indexed as ``image[y, x]``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from visiontools.corners import Corner, Fast, _fast9, _rows, _score

__all__ = ["OrientedFastCorner", "intensity_centroid", "oriented_fast"]

_SAMPLE_POINTS = 1000
_CENTROID_RADIUS = 15


@dataclass(frozen=True)
class OrientedFastCorner:
    """A FAST corner together with the orientation of its local patch."""

    corner: Corner
    orientation: float


def _centroid(rows: list[list[int]], x: int, y: int, radius: int) -> float:
    height = len(rows)
    width = len(rows[0]) if height else 0
    x_min = max(0, x - radius)
    y_min = max(0, y - radius)
    x_max = min(x + radius + 1, width)
    y_max = min(y + radius + 1, height)

    x_moment = 0
    y_moment = 0
    for row_offset, row in enumerate(rows[y_min:y_max]):
        y_weight = radius - row_offset
        for col_offset, pixel in enumerate(row[x_min:x_max]):
            x_moment += (col_offset - radius) * pixel
            y_moment += y_weight * pixel

    # Pixel rows grow downwards; flip the sign so angles follow the usual
    # Cartesian convention.
    return float(np.float32(-math.atan2(float(y_moment), float(x_moment))))


def intensity_centroid(image, x: int, y: int, radius: int) -> float:
    """Orientation of the intensity centroid of the patch around (x, y).

    The patch is the (2 * ``radius`` + 1) square centred on (x, y), clipped
    to the image. The angle is in radians with y pointing up.
    """
    return _centroid(_rows(image), x, y, radius)


def _sampled_threshold(
    rows: list[list[int]],
    width: int,
    height: int,
    edge_radius: int,
    target_num_corners: int,
    seed: int | None,
) -> int:
    min_x, max_x = edge_radius, width - edge_radius
    min_y, max_y = edge_radius, height - edge_radius
    if min_x >= max_x or min_y >= max_y:
        raise ValueError("edge_radius leaves no pixels to sample")

    rng = np.random.default_rng(seed)
    sample_size = min(_SAMPLE_POINTS, width * height)
    xs = rng.integers(min_x, max_x, size=sample_size).tolist()
    ys = rng.integers(min_y, max_y, size=sample_size).tolist()
    scores = sorted(_score(rows, 0, sx, sy, Fast.NINE) for sx, sy in zip(xs, ys))

    fraction = np.float32(target_num_corners) / np.float32(width * height)
    index = int(np.float32(_SAMPLE_POINTS) * (np.float32(1.0) - fraction))
    if not 0 <= index < len(scores):
        raise ValueError(
            f"cannot pick a threshold: sample index {index} outside {len(scores)} samples"
        )
    return scores[index]


def oriented_fast(
    image,
    threshold: int | None,
    target_num_corners: int,
    edge_radius: int,
    seed: int | None = None,
) -> list[OrientedFastCorner]:
    """Find up to ``target_num_corners`` oriented FAST-9 corners.

    Pixels within ``edge_radius`` of the border are ignored. If ``threshold``
    is ``None`` it is estimated from the FAST scores of random sample pixels,
    drawn with ``seed`` when given. Corners are returned strongest first.
    """
    rows = _rows(image)
    height = len(rows)
    width = len(rows[0]) if height else 0
    if 2 * edge_radius > width or 2 * edge_radius > height:
        raise ValueError("edge_radius is too large for the image")

    if threshold is None:
        threshold = _sampled_threshold(
            rows, width, height, edge_radius, target_num_corners, seed
        )

    corners = [
        Corner(x, y, float(_score(rows, threshold, x, y, Fast.NINE)))
        for y in range(edge_radius, height - edge_radius)
        for x in range(edge_radius, width - edge_radius)
        if _fast9(rows, threshold, x, y)
    ]
    corners.sort(key=lambda c: c.score, reverse=True)

    return [
        OrientedFastCorner(c, _centroid(rows, c.x, c.y, _CENTROID_RADIUS))
        for c in corners[:target_num_corners]
    ]