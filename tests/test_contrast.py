import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from visiontools.contrast import (
    adaptive_threshold,
    equalize_histogram,
    equalize_histogram_mut,
    histogram_lut,
    match_histogram,
    match_histogram_mut,
    otsu_level,
    stretch_contrast,
    stretch_contrast_mut,
    threshold,
    threshold_mut,
)


def constant_image(width, height, intensity):
    return np.full((height, width), intensity, dtype=np.uint8)


def gray(rows):
    return np.array(rows, dtype=np.uint8)


small_images = st.integers(1, 8).flatmap(
    lambda h: st.integers(1, 8).flatmap(
        lambda w: st.lists(
            st.integers(0, 255), min_size=w * h, max_size=w * h
        ).map(lambda v: np.array(v, dtype=np.uint8).reshape(h, w))
    )
)


def test_adaptive_threshold_constant():
    image = constant_image(3, 3, 100)
    binary = adaptive_threshold(image, 1)
    np.testing.assert_array_equal(binary, constant_image(3, 3, 255))


@pytest.mark.parametrize("x", range(3))
@pytest.mark.parametrize("y", range(3))
def test_adaptive_threshold_one_darker_pixel(x, y):
    image = constant_image(3, 3, 200)
    image[y, x] = 100
    binary = adaptive_threshold(image, 1)
    expected = constant_image(3, 3, 255)
    expected[y, x] = 0
    np.testing.assert_array_equal(binary, expected)


@pytest.mark.parametrize("x", range(5))
@pytest.mark.parametrize("y", range(5))
def test_adaptive_threshold_one_lighter_pixel(x, y):
    image = constant_image(5, 5, 100)
    image[y, x] = 200
    binary = adaptive_threshold(image, 1)
    for yb in range(5):
        for xb in range(5):
            value = binary[yb, xb]
            if xb == x and yb == y:
                assert value == 255
            elif abs(yb - y) <= 1 and abs(xb - x) <= 1:
                assert value == 0
            else:
                assert value == 255


def test_adaptive_threshold_rejects_zero_radius():
    with pytest.raises(ValueError):
        adaptive_threshold(constant_image(3, 3, 10), 0)


def test_histogram_lut_source_and_target_equal():
    histc = [0] + [2 * i for i in range(1, 256)]
    assert histogram_lut(histc, histc) == list(range(256))


def test_histogram_lut_gradient_to_step_contrast():
    grad_histc = list(range(256))
    step_histc = [0] * 256
    for i in range(30, 130):
        step_histc[i] = 100
    for i in range(130, 256):
        step_histc[i] = 200

    lut = histogram_lut(grad_histc, step_histc)

    expected = [0] + [29] * 63 + [30] * 64 + [129] * 64 + [130] * 64
    assert lut == expected


def test_histogram_lut_rejects_wrong_length():
    with pytest.raises(ValueError):
        histogram_lut([1] * 10, [1] * 256)


@pytest.mark.parametrize("intensity", [0, 128, 255])
def test_otsu_constant(intensity):
    assert otsu_level(constant_image(10, 10, intensity)) == 0


def test_otsu_level_gradient():
    image = gray([[x * 10 for x in range(26)]])
    assert otsu_level(image) == 120


def test_threshold_0_image_0():
    actual = threshold(constant_image(10, 10, 0), 0)
    np.testing.assert_array_equal(actual, constant_image(10, 10, 0))


def test_threshold_0_image_1():
    actual = threshold(constant_image(10, 10, 1), 0)
    np.testing.assert_array_equal(actual, constant_image(10, 10, 255))


def test_threshold_threshold_255_image_255():
    actual = threshold(constant_image(10, 10, 255), 255)
    np.testing.assert_array_equal(actual, constant_image(10, 10, 0))


def test_threshold_gradient():
    original = gray([[x * 10 for x in range(26)]])
    expected = gray([[0] * 13 + [255] * 13])
    np.testing.assert_array_equal(threshold(original, 125), expected)


def test_threshold_example():
    image = gray([[10, 80, 20], [50, 90, 70]])
    expected = gray([[0, 255, 0], [0, 255, 255]])
    np.testing.assert_array_equal(threshold(image, 50), expected)
    np.testing.assert_array_equal(image, gray([[10, 80, 20], [50, 90, 70]]))


def test_threshold_mut_example():
    image = gray([[10, 80, 20], [50, 90, 70]])
    threshold_mut(image, 50)
    np.testing.assert_array_equal(image, gray([[0, 255, 0], [0, 255, 255]]))


def test_threshold_mut_requires_array():
    with pytest.raises(TypeError):
        threshold_mut([[1, 2], [3, 4]], 2)


@settings(max_examples=50)
@given(small_images, st.integers(0, 255))
def test_threshold_matches_comparison(image, level):
    result = threshold(image, level)
    assert set(np.unique(result)) <= {0, 255}
    np.testing.assert_array_equal(result == 255, image > level)


def test_stretch_contrast_example():
    image = gray([[0, 20, 50], [80, 100, 255]])
    expected = gray([[0, 0, 95], [191, 255, 255]])
    np.testing.assert_array_equal(stretch_contrast(image, 20, 100), expected)


def test_stretch_contrast_mut_in_place():
    image = gray([[0, 20, 50], [80, 100, 255]])
    stretch_contrast_mut(image, 20, 100)
    np.testing.assert_array_equal(image, gray([[0, 0, 95], [191, 255, 255]]))


@pytest.mark.parametrize("lower,upper", [(50, 50), (80, 20)])
def test_stretch_contrast_rejects_bad_bounds(lower, upper):
    with pytest.raises(ValueError):
        stretch_contrast(constant_image(2, 2, 10), lower, upper)


def test_equalize_histogram_constant_image_is_white():
    result = equalize_histogram(constant_image(4, 4, 77))
    np.testing.assert_array_equal(result, constant_image(4, 4, 255))


def test_equalize_histogram_two_levels():
    image = gray([[10, 10, 200, 200]])
    np.testing.assert_array_equal(equalize_histogram(image), gray([[127, 127, 255, 255]]))


def test_equalize_histogram_mut_in_place():
    image = gray([[10, 10, 200, 200]])
    equalize_histogram_mut(image)
    np.testing.assert_array_equal(image, gray([[127, 127, 255, 255]]))


@settings(max_examples=50)
@given(small_images)
def test_equalize_histogram_preserves_order(image):
    result = equalize_histogram(image)
    flat_in = image.ravel().astype(int)
    flat_out = result.ravel().astype(int)
    order = np.argsort(flat_in, kind="stable")
    assert np.all(np.diff(flat_out[order]) >= 0)
    assert flat_out.max() == 255


@settings(max_examples=50)
@given(small_images)
def test_match_histogram_to_self_is_identity(image):
    np.testing.assert_array_equal(match_histogram(image, image), image)


def test_match_histogram_to_constant_target():
    image = gray([[0, 50, 100], [150, 200, 250]])
    target = constant_image(5, 5, 150)
    np.testing.assert_array_equal(match_histogram(image, target), constant_image(3, 2, 150))


def test_match_histogram_mut_in_place():
    image = gray([[0, 50, 100], [150, 200, 250]])
    match_histogram_mut(image, constant_image(5, 5, 150))
    np.testing.assert_array_equal(image, constant_image(3, 2, 150))