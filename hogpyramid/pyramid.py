"""Multi-scale HOG feature pyramids.

Levels follow a geometric schedule with ``interval = ceil(nscales / 3)``
levels per octave. Each of the first ``interval`` levels is an arbitrary
ratio resize of the source (a "seed"); every later level is a 2x smoothed
downsample of the level one octave finer in the same chain. Only
``interval`` expensive resizes are needed regardless of ``nscales``.

Usage::

    pyr = build_pyramid(image, nscales=10, binsize=8)
    for level in pyr:
        level.scale, level.features.shape
"""

import collections.abc
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ._constants import BINSIZE, FLEN
from ._samples import check_image, working_dtype
from ._view import FeatureView
from .features import compute_features
from .resample import downsample_half, pad_border, rescale

__all__ = ["PyramidLevel", "FeaturePyramid", "scale_schedule",
           "pyramid_images", "build_pyramid", "PAD_ROWS", "PAD_CELLS"]

logger = logging.getLogger(__name__)

# Border added around every level: one row above and below, one cell
# (FLEN columns) left and right.
PAD_ROWS = 1
PAD_CELLS = 1


def scale_schedule(nscales: int) -> Tuple[int, List[float]]:
    """Return ``(interval, scales)`` for an ``nscales`` pyramid.

    ``scales[j] = 2 ** (-j / interval)``: strictly decreasing, starting at 1.0.
    """
    if nscales < 0:
        raise ValueError(f"nscales must be >= 0, got {nscales}")
    if nscales == 0:
        return 0, []
    interval = int(math.ceil(nscales / 3.0))
    step = 2.0 ** (1.0 / interval)
    return interval, [1.0 / step ** j for j in range(nscales)]


def pyramid_images(image: np.ndarray, nscales: int,
                   max_workers: Optional[int] = None) -> List[np.ndarray]:
    """Resample ``image`` into ``nscales`` images, fine to coarse.

    Seed chains run concurrently; each chain writes only its own slots.
    """
    interval, scales = scale_schedule(nscales)
    images: List[Optional[np.ndarray]] = [None] * nscales

    def build_chain(i: int) -> None:
        scaled = rescale(image, scales[i])
        images[i] = scaled
        for j in range(i + interval, nscales, interval):
            scaled = downsample_half(scaled)
            images[j] = scaled

    if interval:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            list(pool.map(build_chain, range(interval)))
    return images


@dataclass(frozen=True)
class PyramidLevel:
    """One pyramid level: its scale and its padded feature map."""
    scale: float
    features: np.ndarray

    @property
    def view(self) -> FeatureView:
        """(rows, cells, FLEN) view of the padded feature map."""
        return FeatureView(self.features, FLEN)

    def unpadded(self) -> np.ndarray:
        """The extractor output without the constant border."""
        return self.view.crop(PAD_ROWS, PAD_ROWS, PAD_CELLS, PAD_CELLS).flat


class FeaturePyramid(collections.abc.Sequence):
    """Ordered (scale, feature map) levels, fine to coarse."""

    def __init__(self, levels: Sequence[PyramidLevel], binsize: int = BINSIZE):
        self._levels = list(levels)
        self._binsize = binsize

    def __len__(self) -> int:
        return len(self._levels)

    def __getitem__(self, index):
        return self._levels[index]

    def __iter__(self) -> Iterator[PyramidLevel]:
        return iter(self._levels)

    @property
    def binsize(self) -> int:
        return self._binsize

    @property
    def scales(self) -> List[float]:
        return [level.scale for level in self._levels]

    @property
    def features(self) -> List[np.ndarray]:
        """Padded feature maps, one per level."""
        return [level.features for level in self._levels]

    def unpadded(self, index: int) -> np.ndarray:
        return self._levels[index].unpadded()

    def __repr__(self):
        return f"FeaturePyramid(levels={len(self)}, binsize={self._binsize})"


def build_pyramid(image: np.ndarray, nscales: int, binsize: int = BINSIZE,
                  dtype=np.float64, max_workers: Optional[int] = None,
                  planar: bool = False) -> FeaturePyramid:
    """Compute padded HOG features at ``nscales`` geometrically spaced sizes.

    Args:
        image: Source image at native resolution (see ``compute_features``).
        nscales: Number of levels; 0 gives an empty pyramid.
        binsize: Cell side in pixels, shared by all levels.
        dtype: Working precision, float32 or float64.
        max_workers: Thread pool size; None uses the executor default.
        planar: Channels are stored on the first axis.

    Returns:
        FeaturePyramid whose level ``j`` has scale ``2 ** (-j / interval)``.

    Raises:
        UnsupportedFormat: Unsupported element type, channel count or
            working type.
    """
    image = check_image(image, planar=planar)
    work = working_dtype(dtype)
    if binsize < 1:
        raise ValueError(f"binsize must be >= 1, got {binsize}")
    interval, scales = scale_schedule(nscales)
    logger.debug("pyramid: image=%s nscales=%d interval=%d binsize=%d",
                 image.shape, nscales, interval, binsize)

    images = pyramid_images(image, nscales, max_workers=max_workers)
    padded: List[Optional[np.ndarray]] = [None] * nscales

    def extract(n: int) -> None:
        feat = compute_features(images[n], binsize=binsize, dtype=work)
        padded[n] = pad_border(feat, PAD_ROWS, PAD_ROWS,
                               PAD_CELLS * FLEN, PAD_CELLS * FLEN, 0)
        # Levels are shared by concurrent response jobs.
        padded[n].setflags(write=False)
        logger.debug("pyramid level %d: scale=%.4f image=%s features=%s",
                     n, scales[n], images[n].shape[:2], feat.shape)

    if nscales:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            list(pool.map(extract, range(nscales)))

    return FeaturePyramid(
        [PyramidLevel(scale, feat) for scale, feat in zip(scales, padded)],
        binsize=binsize,
    )
