"""Tests for the multi-scale pyramid builder."""

import numpy as np
import pytest

from hogpyramid import FLEN, FeaturePyramid, build_pyramid, compute_features
from hogpyramid.pyramid import pyramid_images, scale_schedule


# ---------------------------------------------------------------------------
# Scale schedule
# ---------------------------------------------------------------------------

class TestScaleSchedule:

    def test_zero_scales(self):
        assert scale_schedule(0) == (0, [])

    def test_single_scale(self):
        interval, scales = scale_schedule(1)
        assert interval == 1
        assert scales == [1.0]

    @pytest.mark.parametrize("nscales,interval", [(1, 1), (3, 1), (4, 2), (9, 3), (10, 4)])
    def test_interval(self, nscales, interval):
        assert scale_schedule(nscales)[0] == interval

    @pytest.mark.parametrize("nscales", [2, 5, 10, 17])
    def test_strictly_decreasing_from_one(self, nscales):
        _, scales = scale_schedule(nscales)
        assert len(scales) == nscales
        assert scales[0] == 1.0
        assert all(a > b for a, b in zip(scales, scales[1:]))

    def test_one_octave_per_interval(self):
        interval, scales = scale_schedule(10)
        for j in range(interval, 10):
            assert scales[j] == pytest.approx(scales[j - interval] / 2)

    def test_negative_raises(self):
        with pytest.raises(ValueError, match="nscales"):
            scale_schedule(-1)


# ---------------------------------------------------------------------------
# Resampled images
# ---------------------------------------------------------------------------

class TestPyramidImages:

    def test_sizes_follow_seed_chains(self, gray_image):
        """interval=2: seeds at 1 and 1/sqrt(2), then pyrDown of each chain."""
        images = pyramid_images(gray_image, 6)
        assert len(images) == 6
        assert images[0].shape == (96, 128)
        assert images[1].shape == (68, 91)
        assert images[2].shape == (48, 64)
        assert images[3].shape == (34, 46)
        assert images[4].shape == (24, 32)
        assert images[5].shape == (17, 23)

    def test_first_level_is_native_copy(self, gray_image):
        images = pyramid_images(gray_image, 3)
        np.testing.assert_array_equal(images[0], gray_image)
        assert images[0] is not gray_image

    def test_dtype_and_channels_preserved(self, color_image):
        for image in pyramid_images(color_image.astype(np.float32), 4):
            assert image.dtype == np.float32
            assert image.shape[2] == 3

    def test_zero_scales(self, gray_image):
        assert pyramid_images(gray_image, 0) == []


# ---------------------------------------------------------------------------
# Feature pyramid
# ---------------------------------------------------------------------------

class TestBuildPyramid:

    def test_empty_pyramid(self, gray_image):
        pyr = build_pyramid(gray_image, 0)
        assert isinstance(pyr, FeaturePyramid)
        assert len(pyr) == 0
        assert pyr.scales == []
        assert pyr.features == []

    def test_levels_and_scales(self, gray_image):
        pyr = build_pyramid(gray_image, 5, binsize=8)
        assert len(pyr) == 5
        assert pyr.scales == scale_schedule(5)[1]
        assert pyr.scales[0] == 1.0
        assert pyr.binsize == 8

    def test_padding_round_trip(self, color_image):
        images = pyramid_images(color_image, 4)
        pyr = build_pyramid(color_image, 4, binsize=8)
        for image, level in zip(images, pyr):
            expected = compute_features(image, binsize=8)
            assert level.features.shape == (expected.shape[0] + 2,
                                            expected.shape[1] + 2 * FLEN)
            np.testing.assert_array_equal(level.unpadded(), expected)

    def test_levels_are_read_only(self, gray_image):
        pyr = build_pyramid(gray_image, 3)
        for level in pyr:
            assert not level.features.flags.writeable
            with pytest.raises(ValueError):
                level.features[0, 0] = 1.0

    def test_border_is_zero(self, gray_image):
        pyr = build_pyramid(gray_image, 3)
        for feat in pyr.features:
            assert np.all(feat[0] == 0)
            assert np.all(feat[-1] == 0)
            assert np.all(feat[:, :FLEN] == 0)
            assert np.all(feat[:, -FLEN:] == 0)

    def test_coarse_levels_may_be_empty(self):
        """Levels smaller than three cells keep only the border."""
        image = np.full((40, 40), 200, dtype=np.uint8)
        pyr = build_pyramid(image, 6, binsize=8)
        last = pyr[-1]
        assert last.unpadded().size == 0
        assert last.features.shape == (2, 2 * FLEN)

    def test_serial_matches_parallel(self, color_image):
        serial = build_pyramid(color_image, 6, max_workers=1)
        parallel = build_pyramid(color_image, 6, max_workers=4)
        for a, b in zip(serial.features, parallel.features):
            np.testing.assert_array_equal(a, b)

    def test_deterministic(self, gray_image):
        first = build_pyramid(gray_image, 4)
        second = build_pyramid(gray_image, 4)
        for a, b in zip(first.features, second.features):
            np.testing.assert_array_equal(a, b)

    def test_float32(self, gray_image):
        pyr = build_pyramid(gray_image, 3, dtype=np.float32)
        assert all(feat.dtype == np.float32 for feat in pyr.features)

    def test_planar_input(self, color_image):
        planar = np.ascontiguousarray(np.moveaxis(color_image, -1, 0))
        a = build_pyramid(planar, 3, planar=True)
        b = build_pyramid(color_image, 3)
        for fa, fb in zip(a.features, b.features):
            np.testing.assert_array_equal(fa, fb)

    def test_level_view(self, gray_image):
        level = build_pyramid(gray_image, 1)[0]
        view = level.view
        assert view.depth == FLEN
        assert view.rows == level.features.shape[0]
        assert view.cells * FLEN == level.features.shape[1]

    def test_sequence_protocol(self, gray_image):
        pyr = build_pyramid(gray_image, 4)
        assert [level.scale for level in pyr] == pyr.scales
        assert pyr[1:3][0] is pyr[1]
        assert len(pyr[1:3]) == 2
        np.testing.assert_array_equal(pyr.unpadded(0), pyr[0].unpadded())

    def test_invalid_binsize(self, gray_image):
        with pytest.raises(ValueError, match="binsize"):
            build_pyramid(gray_image, 2, binsize=0)

    @pytest.mark.slow
    def test_full_size_color(self, rng):
        image = rng.integers(0, 256, size=(480, 640, 3), dtype=np.uint8)
        pyr = build_pyramid(image, 10, binsize=8)
        assert len(pyr) == 10
        assert pyr.unpadded(0).shape == (58, 78 * FLEN)
