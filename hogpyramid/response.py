"""Filter responses over feature maps via strided vector-pixel correlation.

Every spatial position of a feature map and of a filter holds a ``stride``
long vector. The response at an output position is the sum over filter taps
of the dot product between the tap's weights and the co-located feature
vector; the window moves one whole cell (``stride`` buffer columns) at a
time.

Output geometry for a ``(M, N * stride)`` map and a ``(H, W * stride)``
filter is ``(M - H + 1, (N * stride - W * stride + stride) // stride)``.
"""

import logging
import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.lib.stride_tricks import as_strided

from ._constants import FLEN
from ._view import FeatureView, grid_shape
from .pyramid import FeaturePyramid

__all__ = ["response_shape", "convolve", "pdf"]

logger = logging.getLogger(__name__)


def _output_size(feature_grid: Tuple[int, int], filter_grid: Tuple[int, int],
                 stride: int) -> Tuple[int, int]:
    rows = feature_grid[0] - filter_grid[0] + 1
    cols = (feature_grid[1] * stride - filter_grid[1] * stride + stride) // stride
    return max(rows, 0), max(cols, 0)


def response_shape(feature_shape: Tuple[int, ...], filter_shape: Tuple[int, ...],
                   stride: int = FLEN) -> Tuple[int, int]:
    """Return the (rows, cols) of the response of a filter over a feature map.

    Sizes are clamped at zero when the filter is larger than the map.

    Raises:
        PreconditionViolation: If either column count is not a multiple of
            ``stride``.
    """
    return _output_size(grid_shape(feature_shape, stride),
                        grid_shape(filter_shape, stride), stride)


def convolve(feature: np.ndarray, filt: np.ndarray, stride: int = FLEN) -> np.ndarray:
    """Correlate one filter with one feature map.

    A filter of another float type is not a layout error: it is cast to the
    feature map's type with a ``UserWarning`` and scored normally. Only a
    stride or channel depth mismatch is fatal.

    Args:
        feature: Feature map, ``(rows, cells * stride)`` or ``(rows, cells, stride)``.
        filt: Filter weights in either of the same layouts.
        stride: Vector length per cell.

    Returns:
        Response map in the feature map's dtype.

    Raises:
        PreconditionViolation: Filter and feature map disagree with ``stride``.
    """
    fview = FeatureView(feature, stride)
    wview = FeatureView(filt, stride)
    out_shape = _output_size((fview.rows, fview.cells),
                             (wview.rows, wview.cells), stride)

    weights = wview.tensor
    if weights.dtype != fview.dtype:
        warnings.warn(
            f"Filter dtype {weights.dtype} differs from feature dtype "
            f"{fview.dtype}; casting filter to {fview.dtype}.",
            UserWarning,
            stacklevel=2,
        )
        weights = weights.astype(fview.dtype)

    if out_shape[0] == 0 or out_shape[1] == 0:
        return np.zeros(out_shape, dtype=fview.dtype)

    # windows[i, j] = tensor[i:i+H, j:j+W, :], zero-copy
    tensor = fview.tensor
    s = tensor.strides
    windows = as_strided(
        tensor,
        shape=out_shape + weights.shape,
        strides=(s[0], s[1], s[0], s[1], s[2]),
        writeable=False,
    )
    return np.einsum("ijhwc,hwc->ij", windows, weights)


def pdf(features: Union[FeaturePyramid, Sequence[np.ndarray]],
        filters: Sequence[np.ndarray], stride: int = FLEN,
        max_workers: Optional[int] = None) -> List[np.ndarray]:
    """Score every filter against every feature map.

    Slot ``i`` of the result holds feature map ``i // len(filters)`` scored by
    filter ``i % len(filters)``. Pairs are computed concurrently into a
    pre-sized list.

    Args:
        features: Feature maps, or a FeaturePyramid whose padded levels are
            scored.
        filters: Part filters sharing the feature maps' stride.
        stride: Vector length per cell.
        max_workers: Thread pool size; None uses the executor default.

    Returns:
        ``len(features) * len(filters)`` response maps.
    """
    if isinstance(features, FeaturePyramid):
        features = features.features
    features = list(features)
    filters = list(filters)
    m, n = len(features), len(filters)
    responses: List[Optional[np.ndarray]] = [None] * (m * n)
    if not responses:
        return []
    logger.debug("pdf: %d feature maps x %d filters", m, n)

    def score(i: int) -> None:
        responses[i] = convolve(features[i // n], filters[i % n], stride)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        list(pool.map(score, range(m * n)))
    return responses
