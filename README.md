# visiontools

Image processing routines for grayscale images held as two-dimensional
NumPy arrays indexed `image[y, x]`. Most routines expect 8-bit (`uint8`)
pixels; functions whose names end in `_mut` change their array argument in
place and return `None`.

## Modules

- `visiontools.definitions`: the `Point` value type (with `+`, `-` and
  unpacking), the `Depth` enum of channel types, `clamp(value, depth)`, and
  `black(channels, depth)` / `white(channels, depth)` pixel tuples for 8- and
  16-bit pixels with 1 to 4 channels (any alpha channel is opaque).
- `visiontools.contours`: border following after Suzuki and Abe.
  `find_contours(image)` treats non-zero pixels as foreground;
  `find_contours_with_threshold(image, threshold)` uses pixels strictly above
  the threshold. Each `Contour` has `points`, a `border_type`
  (`BorderType.OUTER` or `BorderType.HOLE`) and the index of its `parent`.
- `visiontools.contrast`: `threshold` / `threshold_mut`,
  `adaptive_threshold`, `otsu_level`, `equalize_histogram` /
  `equalize_histogram_mut`, `match_histogram` / `match_histogram_mut`,
  `histogram_lut`, and `stretch_contrast` / `stretch_contrast_mut`.
- `visiontools.corners`: FAST corner detection. `corners_fast9` and
  `corners_fast12` return `Corner` objects (`x`, `y`, `score`, and
  `to_point()`) in row-major order; `is_corner_fast9`, `is_corner_fast12`
  and `fast_corner_score` work on a single pixel, with the variant chosen by
  `Fast.NINE` or `Fast.TWELVE`.
- `visiontools.oriented_fast`: `oriented_fast(image, threshold,
  target_num_corners, edge_radius, seed)` returns the strongest FAST-9
  corners as `OrientedFastCorner` objects, each with an orientation from
  `intensity_centroid`. With `threshold=None` the threshold is estimated from
  the scores of randomly sampled pixels, drawn with `seed` when given.
- `visiontools.distance_transform`: `distance_transform` /
  `distance_transform_mut` for the `Norm.L1` and `Norm.LINF` norms
  (saturating at 255), `distance_transform_impl` to measure from
  `DistanceFrom.FOREGROUND` or `DistanceFrom.BACKGROUND` pixels,
  `distance_transform_1d` for sampled functions, and
  `euclidean_squared_distance_transform`, which returns `float64` distances.
- `visiontools.binary_descriptors.brief`: BRIEF descriptors. `brief`
  returns the `BriefDescriptor` objects and the `TestPair` list it used;
  `brief_from_integral` and `local_pixel_average` work on a padded integral
  image. A descriptor offers `size()`, `hamming_distance(other)`,
  `bit_subset(bits)` and `position()`.
- `visiontools.binary_descriptors.matching`: `match_binary_descriptors(d1,
  d2, threshold, seed)` pairs descriptors using locality-sensitive hashing
  and keeps pairs whose Hamming distance is below `threshold`.

## Installation

```
pip install visiontools
```

## Example

```python
import numpy as np
from visiontools.contrast import threshold, otsu_level
from visiontools.distance_transform import distance_transform, Norm

image = np.array([[10, 80, 20], [50, 90, 70]], dtype=np.uint8)
binary = threshold(image, 50)
# [[0, 255, 0], [0, 255, 255]]

level = otsu_level(image)

seed = np.zeros((5, 5), dtype=np.uint8)
seed[2, 2] = 1
distances = distance_transform(seed, Norm.L1)
```

Matching BRIEF descriptors between two images:

```python
from visiontools.corners import corners_fast9
from visiontools.binary_descriptors.brief import brief
from visiontools.binary_descriptors.matching import match_binary_descriptors

points_a = [c.to_point() for c in corners_fast9(image_a, 70)]
points_b = [c.to_point() for c in corners_fast9(image_b, 70)]
descriptors_a, pairs = brief(image_a, points_a, 256, None)
descriptors_b, _ = brief(image_b, points_b, 256, pairs)
matches = match_binary_descriptors(descriptors_a, descriptors_b, 24, 0xC0)
```

The descriptor length must be a multiple of 128 and equal to the number of
test pairs. A keypoint too close to the image edge (x or y of 15 or less, or
more than 15 past width - 15 or height - 15) raises `ValueError`.

## What it does not do

The package works only on arrays already in memory. It does not read or
write image files, draw on images, display them, or provide command-line
tools.

## Running the tests

```
pip install -e .[test]
pytest
```