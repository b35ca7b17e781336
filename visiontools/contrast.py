"""Contrast manipulation for 8-bit grayscale images.

Images are two-dimensional ``numpy.uint8`` arrays indexed as ``image[y, x]``.
Functions ending in ``_mut`` modify their argument in place and return ``None``.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

__all__ = [
    "adaptive_threshold",
    "otsu_level",
    "threshold",
    "threshold_mut",
    "equalize_histogram_mut",
    "equalize_histogram",
    "match_histogram_mut",
    "match_histogram",
    "histogram_lut",
    "stretch_contrast",
    "stretch_contrast_mut",
]

_LEVELS = 256


def _gray(image) -> np.ndarray:
    pixels = np.asarray(image)
    if pixels.ndim != 2:
        raise ValueError("expected a single-channel two-dimensional image")
    return pixels.astype(np.uint8, copy=False)


def _gray_in_place(image) -> np.ndarray:
    if not isinstance(image, np.ndarray):
        raise TypeError("in-place operations need a numpy array")
    if image.ndim != 2:
        raise ValueError("expected a single-channel two-dimensional image")
    if image.dtype != np.uint8:
        raise TypeError("in-place operations need a uint8 image")
    return image


def _histogram(pixels: np.ndarray) -> np.ndarray:
    return np.bincount(pixels.ravel(), minlength=_LEVELS).astype(np.int64)


def _cumulative_histogram(pixels: np.ndarray) -> np.ndarray:
    return np.cumsum(_histogram(pixels))


def adaptive_threshold(image, block_radius: int) -> np.ndarray:
    """Binarise by comparing each pixel with the mean of its surrounding block.

    The block is the (2 * ``block_radius`` + 1) square centred on the pixel,
    clipped to the image. Pixels at least as bright as the (integer) mean
    become 255, all others 0.
    """
    if block_radius <= 0:
        raise ValueError("block_radius must be positive")
    pixels = _gray(image)
    height, width = pixels.shape
    if height == 0 or width == 0:
        return np.zeros_like(pixels)

    integral = np.zeros((height + 1, width + 1), dtype=np.int64)
    integral[1:, 1:] = pixels.astype(np.int64).cumsum(axis=0).cumsum(axis=1)

    ys = np.arange(height)
    xs = np.arange(width)
    y_low = np.maximum(0, ys - block_radius)
    y_high = np.minimum(height - 1, ys + block_radius)
    x_low = np.maximum(0, xs - block_radius)
    x_high = np.minimum(width - 1, xs + block_radius)

    sums = (
        integral[np.ix_(y_high + 1, x_high + 1)]
        - integral[np.ix_(y_low, x_high + 1)]
        - integral[np.ix_(y_high + 1, x_low)]
        + integral[np.ix_(y_low, x_low)]
    )
    counts = np.outer(y_high - y_low + 1, x_high - x_low + 1)
    means = sums // counts

    return np.where(pixels.astype(np.int64) >= means, 255, 0).astype(np.uint8)


def otsu_level(image) -> int:
    """Return the Otsu threshold level of an 8-bit image."""
    pixels = _gray(image)
    hist = _histogram(pixels).tolist()
    total_weight = pixels.size

    total_pixel_sum = float(sum(t * h for t, h in enumerate(hist)))
    background_pixel_sum = 0.0
    background_weight = 0
    largest_variance = 0.0
    best_threshold = 0

    for level, count in enumerate(hist):
        background_weight += count
        if background_weight == 0:
            continue
        foreground_weight = total_weight - background_weight
        if foreground_weight == 0:
            break

        background_pixel_sum += float(level * count)
        foreground_pixel_sum = total_pixel_sum - background_pixel_sum

        background_mean = background_pixel_sum / background_weight
        foreground_mean = foreground_pixel_sum / foreground_weight
        variance = (
            float(background_weight)
            * float(foreground_weight)
            * (background_mean - foreground_mean) ** 2
        )
        if variance > largest_variance:
            largest_variance = variance
            best_threshold = level

    return best_threshold


def threshold(image, thresh: int) -> np.ndarray:
    """Binarise with a fixed threshold; pixels equal to it become background."""
    out = _gray(image).copy()
    threshold_mut(out, thresh)
    return out


def threshold_mut(image, thresh: int) -> None:
    """Binarise ``image`` in place; pixels equal to the threshold become 0."""
    pixels = _gray_in_place(image)
    pixels[...] = np.where(pixels <= thresh, 0, 255).astype(np.uint8)


def equalize_histogram_mut(image) -> None:
    """Equalise the histogram of ``image`` in place."""
    pixels = _gray_in_place(image)
    if pixels.size == 0:
        return
    hist = _cumulative_histogram(pixels).astype(np.float32)
    total = np.float32(hist[-1])
    fraction = hist[pixels] / total
    scaled = np.minimum(np.float32(255.0), np.float32(255.0) * fraction)
    pixels[...] = scaled.astype(np.uint8)


def equalize_histogram(image) -> np.ndarray:
    """Return a copy of ``image`` with its histogram equalised."""
    out = _gray(image).copy()
    equalize_histogram_mut(out)
    return out


def match_histogram_mut(image, target) -> None:
    """Adjust ``image`` in place so its histogram is close to that of ``target``."""
    pixels = _gray_in_place(image)
    source_histc = _cumulative_histogram(pixels)
    target_histc = _cumulative_histogram(_gray(target))
    lut = np.array(histogram_lut(source_histc, target_histc), dtype=np.uint8)
    pixels[...] = lut[pixels]


def match_histogram(image, target) -> np.ndarray:
    """Return a copy of ``image`` whose histogram is close to that of ``target``."""
    out = _gray(image).copy()
    match_histogram_mut(out, target)
    return out


def histogram_lut(source_histc: Sequence[int], target_histc: Sequence[int]) -> list[int]:
    """Build a lookup table mapping source levels to target levels.

    Both arguments are 256-entry cumulative histograms. Entry ``i`` of the
    result is chosen so that the target's cumulative fraction at that level is
    as close as possible to the source's cumulative fraction at ``i``.
    """
    source = [int(v) for v in source_histc]
    target = [int(v) for v in target_histc]
    if len(source) != _LEVELS or len(target) != _LEVELS:
        raise ValueError("cumulative histograms must have 256 entries")

    source_total = np.float32(source[-1])
    target_total = np.float32(target[-1])

    lut: list[int] = []
    y = 0
    prev_target_fraction = np.float32(0.0)

    for count in source:
        source_fraction = np.float32(count) / source_total
        target_fraction = np.float32(target[y]) / target_total

        while source_fraction > target_fraction and y < _LEVELS - 1:
            y += 1
            prev_target_fraction = target_fraction
            target_fraction = np.float32(target[y]) / target_total

        if y == 0:
            lut.append(y)
        else:
            prev_dist = abs(prev_target_fraction - source_fraction)
            dist = abs(target_fraction - source_fraction)
            lut.append(y - 1 if prev_dist < dist else y)

    return lut


def stretch_contrast(image, lower: int, upper: int) -> np.ndarray:
    """Linearly stretch contrast, sending ``lower`` to 0 and ``upper`` to 255."""
    out = _gray(image).copy()
    stretch_contrast_mut(out, lower, upper)
    return out


def stretch_contrast_mut(image, lower: int, upper: int) -> None:
    """Linearly stretch contrast in place, sending ``lower`` to 0 and ``upper`` to 255."""
    if upper <= lower:
        raise ValueError("upper must be strictly greater than lower")
    pixels = _gray_in_place(image)
    span = upper - lower
    wide = pixels.astype(np.int32)
    scaled = (255 * (wide - lower)) // span
    result = np.where(wide >= upper, 255, np.where(wide <= lower, 0, scaled))
    pixels[...] = result.astype(np.uint8)