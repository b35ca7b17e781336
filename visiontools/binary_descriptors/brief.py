"""BRIEF binary descriptors for small patches around keypoints.

Images are two-dimensional arrays indexed as ``image[y, x]``. Integral images
have one extra leading row and column of zeros, so ``integral[y, x]`` is the
sum of all pixels above and to the left of (x, y).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from visiontools.corners import Corner
from visiontools.definitions import Point

__all__ = [
    "BRIEF_PATCH_RADIUS",
    "BRIEF_PATCH_DIAMETER",
    "BriefDescriptor",
    "TestPair",
    "local_pixel_average",
    "brief_from_integral",
    "brief",
]

BRIEF_PATCH_RADIUS = 15
BRIEF_PATCH_DIAMETER = BRIEF_PATCH_RADIUS * 2 + 1

_CHUNK_BITS = 128
_CHUNK_MASK = (1 << _CHUNK_BITS) - 1
_AVERAGE_RADIUS = 2
_PAIR_SIGMA = 6.6


@dataclass
class BriefDescriptor:
    """The results of pairwise intensity tests around a keypoint.

    ``bits`` holds the test results in 128-bit chunks.
    """

    bits: list[int]
    corner: Corner

    def size(self) -> int:
        """Length of the descriptor in bits; always a multiple of 128."""
        return len(self.bits) * _CHUNK_BITS

    def hamming_distance(self, other: BriefDescriptor) -> int:
        """Number of bits that differ between two descriptors of equal size."""
        if self.size() != other.size():
            raise ValueError(
                f"descriptor sizes differ ({self.size()} != {other.size()})"
            )
        return sum((a ^ b).bit_count() for a, b in zip(self.bits, other.bits))

    def bit_subset(self, bits: Sequence[int]) -> int:
        """Concatenate the bits at the given indices, first index highest."""
        if len(bits) > _CHUNK_BITS:
            raise ValueError(
                f"Can't extract more than 128 bits (found {len(bits)})"
            )
        subset = 0
        for b in bits:
            chunk = self.bits[b // _CHUNK_BITS]
            subset = (subset << 1) | ((chunk >> (b % _CHUNK_BITS)) & 1)
        return subset

    def position(self) -> Point:
        """Pixel location of the descriptor's keypoint."""
        return self.corner.to_point()


@dataclass(frozen=True)
class TestPair:
    """Two patch-relative points whose intensities a BRIEF test compares."""

    __test__ = False

    p0: Point
    p1: Point


def _integral_image(image) -> np.ndarray:
    pixels = np.asarray(image)
    if pixels.ndim != 2:
        raise ValueError("expected a single-channel two-dimensional image")
    height, width = pixels.shape
    integral = np.zeros((height + 1, width + 1), dtype=np.int64)
    integral[1:, 1:] = pixels.astype(np.int64).cumsum(axis=0).cumsum(axis=1)
    return integral


def _average(integral: list[list[int]], x: int, y: int, radius: int) -> int:
    if radius == 0:
        return 0
    height = len(integral)
    width = len(integral[0]) if height else 0
    y_min = max(0, y - radius)
    x_min = max(0, x - radius)
    y_max = min(y + radius + 1, height - 1)
    x_max = min(x + radius + 1, width - 1)

    area = (y_max - y_min) * (x_max - x_min)
    if area <= 0:
        return 0
    total = (
        integral[y_max][x_max]
        + integral[y_min][x_min]
        - integral[y_min][x_max]
        - integral[y_max][x_min]
    )
    return (total // area) & 0xFF


def local_pixel_average(integral, x: int, y: int, radius: int) -> int:
    """Mean intensity of the square of the given radius around (x, y).

    The square is clipped to the image; an empty square averages to 0.
    """
    return _average(np.asarray(integral).tolist(), x, y, radius)


def brief_from_integral(
    integral,
    keypoints: Sequence[Point],
    test_pairs: Sequence[TestPair],
    length: int,
) -> list[BriefDescriptor]:
    """Compute BRIEF descriptors from a padded integral image.

    Raises ``ValueError`` if ``length`` is not a multiple of 128, differs from
    the number of test pairs, or a keypoint lies too close to the image edge.
    """
    if length % _CHUNK_BITS != 0:
        raise ValueError(
            f"BRIEF descriptor length must be a multiple of 128 bits (found {length})"
        )
    if length != len(test_pairs):
        raise ValueError(
            "BRIEF descriptor length must be equal to the number of test pairs "
            f"({length} != {len(test_pairs)})"
        )

    rows = np.asarray(integral).tolist()
    height = len(rows)
    width = len(rows[0]) if height else 0
    radius = BRIEF_PATCH_RADIUS

    descriptors = []
    for keypoint in keypoints:
        if (
            keypoint.x <= radius
            or keypoint.x + radius >= width
            or keypoint.y <= radius
            or keypoint.y + radius >= height
        ):
            raise ValueError(
                f"Found keypoint within {radius + 1} px of image edge: "
                f"({keypoint.x}, {keypoint.y})"
            )

        left = keypoint.x - radius + 1
        top = keypoint.y - radius + 1
        chunks: list[int] = []
        chunk = 0
        for index, pair in enumerate(test_pairs):
            if index != 0 and index % _CHUNK_BITS == 0:
                chunks.append(chunk)
                chunk = 0
            first = _average(rows, pair.p0.x + left, pair.p0.y + top, _AVERAGE_RADIUS)
            second = _average(rows, pair.p1.x + left, pair.p1.y + top, _AVERAGE_RADIUS)
            chunk = ((chunk + (first < second)) << 1) & _CHUNK_MASK
        chunks.append(chunk)
        descriptors.append(BriefDescriptor(chunks, Corner(keypoint.x, keypoint.y, 0.0)))

    return descriptors


def _random_test_pairs(length: int) -> list[TestPair]:
    rng = np.random.default_rng()
    centre = BRIEF_PATCH_RADIUS + 1.0
    pairs: list[TestPair] = []
    while len(pairs) < length:
        x0, y0, x1, y1 = (max(0, int(v)) for v in rng.normal(centre, _PAIR_SIGMA, 4))
        if max(x0, y0, x1, y1) < BRIEF_PATCH_DIAMETER:
            pairs.append(TestPair(Point(x0, y0), Point(x1, y1)))
    return pairs


def brief(
    image,
    keypoints: Sequence[Point],
    length: int,
    override_test_pairs: Sequence[TestPair] | None = None,
) -> tuple[list[BriefDescriptor], list[TestPair]]:
    """Compute BRIEF descriptors for 31x31 patches around keypoints.

    Uses ``override_test_pairs`` when given, otherwise draws test pairs from
    an isotropic Gaussian centred on the patch. Returns the descriptors and
    the test pairs used. Keypoints must be at least 17 pixels from any edge.
    """
    if override_test_pairs is not None:
        test_pairs = list(override_test_pairs)
    else:
        test_pairs = _random_test_pairs(length)
    descriptors = brief_from_integral(_integral_image(image), keypoints, test_pairs, length)
    return descriptors, test_pairs