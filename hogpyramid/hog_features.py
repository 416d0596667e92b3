"""HOGFeatures — feature pyramids and part-filter responses behind one object.

Usage::

    hog = HOGFeatures(binsize=8, nscales=10)
    pyr = hog.pyramid(image)          # FeaturePyramid, fine to coarse
    responses = hog.pdf(pyr, filters)  # len(pyr) * len(filters) maps
    hog.scales                         # scales of the last pyramid
"""

from typing import List, Optional, Sequence, Union

import numpy as np

from ._constants import BINSIZE, NSCALES
from .features import compute_features
from .params import HOGParams
from .pyramid import FeaturePyramid, build_pyramid
from .response import convolve, pdf

__all__ = ["HOGFeatures"]


class HOGFeatures:
    """HOG feature extractor with a fixed cell size, level count and precision."""

    def __init__(self, binsize: int = BINSIZE, nscales: int = NSCALES,
                 dtype=np.float64, nthreads: Optional[int] = None):
        """Initialize the extractor.

        Args:
            binsize: Cell side in pixels.
            nscales: Number of pyramid levels.
            dtype: Working precision of features and responses (float32 or float64).
            nthreads: Worker threads for the parallel phases. None lets the
                      thread pool decide.

        Raises:
            ValueError: Invalid ``binsize``, ``nscales`` or ``nthreads``.
            UnsupportedFormat: ``dtype`` is not float32 or float64.
        """
        self._params = HOGParams(binsize=binsize, nscales=nscales, dtype=dtype,
                                 nthreads=nthreads)
        self._scales: List[float] = []

    @classmethod
    def from_params(cls, params: HOGParams) -> "HOGFeatures":
        return cls(binsize=params.binsize, nscales=params.nscales,
                   dtype=params.dtype, nthreads=params.nthreads)

    @classmethod
    def from_json(cls, path: str) -> "HOGFeatures":
        """Create an extractor from a JSON parameter sidecar."""
        return cls.from_params(HOGParams.from_json(path))

    # ── Features ──────────────────────────────────────────────────────

    def features(self, image: np.ndarray, planar: bool = False) -> np.ndarray:
        """Unpadded feature map of ``image`` at native resolution."""
        return compute_features(image, binsize=self.binsize, dtype=self.dtype,
                                planar=planar)

    def pyramid(self, image: np.ndarray, planar: bool = False) -> FeaturePyramid:
        """Padded feature maps at ``nscales`` sizes, fine to coarse.

        The level scales are kept in ``scales`` until the next call.
        """
        pyr = build_pyramid(image, self.nscales, binsize=self.binsize,
                            dtype=self.dtype, max_workers=self.nthreads,
                            planar=planar)
        self._scales = pyr.scales
        return pyr

    # ── Responses ─────────────────────────────────────────────────────

    def convolve(self, feature: np.ndarray, filt: np.ndarray) -> np.ndarray:
        """Response of one filter over one feature map."""
        return convolve(feature, filt, self.flen)

    def pdf(self, features: Union[FeaturePyramid, Sequence[np.ndarray]],
            filters: Sequence[np.ndarray]) -> List[np.ndarray]:
        """Responses of every filter over every feature map (filter index fastest)."""
        return pdf(features, filters, self.flen, max_workers=self.nthreads)

    # ── Properties ────────────────────────────────────────────────────

    @property
    def params(self) -> HOGParams:
        return self._params

    @property
    def binsize(self) -> int:
        """Cell side in pixels."""
        return self._params.binsize

    @property
    def nscales(self) -> int:
        return self._params.nscales

    @property
    def flen(self) -> int:
        """Feature vector length per cell."""
        return self._params.flen

    @property
    def dtype(self) -> np.dtype:
        """Working precision."""
        return self._params.working_dtype

    @property
    def nthreads(self) -> Optional[int]:
        return self._params.nthreads

    @property
    def scales(self) -> List[float]:
        """Scales of the most recent pyramid (empty before the first call)."""
        return list(self._scales)

    def __repr__(self):
        return (f"HOGFeatures(binsize={self.binsize}, nscales={self.nscales}, "
                f"dtype={self.dtype.name}, nthreads={self.nthreads})")
