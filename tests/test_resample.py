"""Tests for the OpenCV-backed resampler and the border padder."""

import numpy as np
import pytest

from hogpyramid.resample import (
    downsample_half, pad_border, rescale, resize, scaled_size,
)


class TestResize:

    def test_target_size_is_width_height(self, gray_image):
        out = resize(gray_image, (50, 30))
        assert out.shape == (30, 50)
        assert out.dtype == np.uint8

    def test_same_size_returns_copy(self, gray_image):
        out = resize(gray_image, (128, 96))
        np.testing.assert_array_equal(out, gray_image)
        assert out is not gray_image

    def test_keeps_singleton_channel_axis(self, gray_image):
        out = resize(gray_image[:, :, np.newaxis], (64, 48))
        assert out.shape == (48, 64, 1)

    @pytest.mark.parametrize("dtype", [np.uint8, np.uint16, np.float32, np.float64])
    def test_dtypes_preserved(self, color_image, dtype):
        out = resize(color_image.astype(dtype), (40, 20))
        assert out.dtype == dtype
        assert out.shape == (20, 40, 3)

    def test_constant_image_stays_constant(self):
        image = np.full((20, 30), 7.5)
        np.testing.assert_allclose(resize(image, (13, 11)), 7.5)

    def test_non_positive_size_raises(self, gray_image):
        with pytest.raises(ValueError):
            resize(gray_image, (0, 10))


class TestRescale:

    def test_scaled_size_rounds(self):
        assert scaled_size((96, 128), 2 ** -0.5) == (91, 68)
        assert scaled_size((10, 10), 0.25) == (3, 3)

    def test_scaled_size_at_least_one(self):
        assert scaled_size((4, 4), 0.01) == (1, 1)

    def test_factor_must_be_positive(self):
        with pytest.raises(ValueError):
            scaled_size((4, 4), 0)

    def test_rescale(self, color_image):
        assert rescale(color_image, 0.5).shape == (48, 64, 3)


class TestDownsampleHalf:

    @pytest.mark.parametrize("shape,expected", [((96, 128), (48, 64)),
                                                ((35, 47), (18, 24))])
    def test_sizes(self, shape, expected):
        out = downsample_half(np.zeros(shape, dtype=np.float32))
        assert out.shape == expected

    def test_keeps_channels(self, color_image):
        assert downsample_half(color_image).shape == (48, 64, 3)
        gray = color_image[:, :, :1]
        assert downsample_half(gray).shape == (48, 64, 1)

    def test_smooths(self):
        image = np.zeros((16, 16))
        image[::2, ::2] = 4.0
        out = downsample_half(image)
        assert out.max() < 4.0
        assert out.min() > 0.0


class TestPadBorder:

    def test_widths_and_value(self):
        grid = np.ones((2, 3))
        out = pad_border(grid, 1, 2, 3, 4, value=0)
        assert out.shape == (5, 10)
        np.testing.assert_array_equal(out[1:3, 3:6], grid)
        assert out.sum() == grid.sum()

    def test_fill_value(self):
        out = pad_border(np.zeros((1, 1)), 1, 1, 1, 1, value=-2.0)
        assert out[0, 0] == -2.0
        assert out[1, 1] == 0.0

    def test_empty_grid(self):
        out = pad_border(np.zeros((0, 0)), 1, 1, 32, 32)
        assert out.shape == (2, 64)
        assert not out.any()

    def test_dtype_preserved(self):
        assert pad_border(np.zeros((2, 2), np.float32), 1, 1, 1, 1).dtype == np.float32

    def test_negative_width_raises(self):
        with pytest.raises(ValueError):
            pad_border(np.zeros((2, 2)), -1, 0, 0, 0)
