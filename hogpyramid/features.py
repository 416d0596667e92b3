"""HOG feature extraction for a single image.

Produces the 32-element per-cell descriptor: 18 contrast-sensitive
orientation features, 9 contrast-insensitive ones, 4 texture energies and a
truncation slot that is always zero.

Usage::

    feat = compute_features(image, binsize=8)
    feat.shape  # (rows, cells * 32)
"""

from typing import List, Tuple

import numpy as np

from ._constants import (
    BINSIZE, EPS, FLEN, INSENSITIVE_OFFSET, NORIENT, SENSITIVE_OFFSET,
    TEXTURE_OFFSET, TEXTURE_WEIGHT, TRUNCATION, TRUNCATION_OFFSET, UU, VV,
)
from ._samples import read_samples

__all__ = ["compute_features", "feature_shape"]

# Corner offsets (row, col) of the 2x2 block neighbourhoods behind the four
# normalizers, relative to the output cell.
_NORM_OFFSETS = ((1, 1), (0, 1), (1, 0), (0, 0))


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


def feature_shape(image_shape: Tuple[int, ...], binsize: int = BINSIZE) -> Tuple[int, int]:
    """Return ``(blocks, outsize)`` as ((rows, cols), (rows, cols)) for an image.

    ``blocks`` is the histogram grid; ``outsize`` drops its two border blocks
    on each axis and is clamped at zero.
    """
    if binsize < 1:
        raise ValueError(f"binsize must be >= 1, got {binsize}")
    h, w = image_shape[:2]
    blocks = (_round_half_up(h / binsize), _round_half_up(w / binsize))
    outsize = (max(blocks[0] - 2, 0), max(blocks[1] - 2, 0))
    return blocks, outsize


def _gradients(samples: np.ndarray, visible: Tuple[int, int]):
    """Centered differences over the visible region, strongest channel per pixel.

    Returns (dx, dy, v) arrays of shape (visible_h - 2, visible_w - 2).
    """
    rows, cols = samples.shape[:2]
    # Visible pixels past the image edge read the last interior pixel.
    ys = np.minimum(np.arange(1, visible[0] - 1), rows - 2)
    xs = np.minimum(np.arange(1, visible[1] - 1), cols - 2)

    dy = samples[np.ix_(ys + 1, xs)] - samples[np.ix_(ys - 1, xs)]
    dx = samples[np.ix_(ys, xs + 1)] - samples[np.ix_(ys, xs - 1)]
    v = dx * dx + dy * dy

    best_dx, best_dy, best_v = dx[..., 0], dy[..., 0], v[..., 0]
    for c in range(1, samples.shape[2]):
        better = v[..., c] > best_v
        best_v = np.where(better, v[..., c], best_v)
        best_dx = np.where(better, dx[..., c], best_dx)
        best_dy = np.where(better, dy[..., c], best_dy)
    return best_dx, best_dy, best_v


def _orientations(dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
    """Snap each gradient to one of the 18 signed orientation bins."""
    uu = UU.astype(dx.dtype)
    vv = VV.astype(dx.dtype)
    best_dot = np.zeros_like(dx)
    best_o = np.zeros(dx.shape, dtype=np.intp)
    for o in range(NORIENT // 2):
        dot = uu[o] * dx + vv[o] * dy
        pos = dot > best_dot
        neg = ~pos & (-dot > best_dot)
        best_dot = np.where(pos, dot, np.where(neg, -dot, best_dot))
        best_o[pos] = o
        best_o[neg] = o + NORIENT // 2
    return best_o


def _interpolation(count: int, binsize: int, work: np.dtype):
    """Lower cell index and (lower, upper) weights for pixels 1..count."""
    half = work.type(0.5)
    p = (np.arange(1, count + 1, dtype=work) + half) / work.type(binsize) - half
    ip = np.floor(p).astype(np.intp)
    upper = p - ip.astype(work)
    lower = work.type(1) - upper
    return ip, lower, upper


def _histograms(samples: np.ndarray, blocks: Tuple[int, int], binsize: int) -> np.ndarray:
    """Accumulate gradient magnitudes into (blocks_h, blocks_w, 18) histograms."""
    work = samples.dtype
    visible = (blocks[0] * binsize, blocks[1] * binsize)
    hist = np.zeros((blocks[0], blocks[1], NORIENT), dtype=work)

    dx, dy, v = _gradients(samples, visible)
    best_o = _orientations(dx, dy)
    mag = np.sqrt(v)

    iy, wy_lo, wy_hi = _interpolation(visible[0] - 2, binsize, work)
    ix, wx_lo, wx_hi = _interpolation(visible[1] - 2, binsize, work)
    iy, wy_lo, wy_hi = iy[:, None], wy_lo[:, None], wy_hi[:, None]

    # Four neighbouring blocks per pixel, stacked on the last axis so the
    # flattened order is pixel-major, corner-minor.
    shape = dx.shape + (4,)
    rows = np.empty(shape, dtype=np.intp)
    cols = np.empty(shape, dtype=np.intp)
    weights = np.empty(shape, dtype=work)
    corners = (
        (iy, ix, wy_lo * wx_lo),
        (iy, ix + 1, wy_lo * wx_hi),
        (iy + 1, ix, wy_hi * wx_lo),
        (iy + 1, ix + 1, wy_hi * wx_hi),
    )
    for k, (r, c, w) in enumerate(corners):
        rows[..., k] = r
        cols[..., k] = c
        weights[..., k] = w * mag

    valid = (rows >= 0) & (rows < blocks[0]) & (cols >= 0) & (cols < blocks[1])
    orient = np.broadcast_to(best_o[..., None], shape)
    np.add.at(hist, (rows[valid], cols[valid], orient[valid]), weights[valid])
    return hist


def _block_energy(hist: np.ndarray) -> np.ndarray:
    half = NORIENT // 2
    energy = np.zeros(hist.shape[:2], dtype=hist.dtype)
    for o in range(half):
        energy += (hist[..., o] + hist[..., o + half]) ** 2
    return energy


def _normalizers(energy: np.ndarray, outsize: Tuple[int, int]) -> List[np.ndarray]:
    oh, ow = outsize
    eps = energy.dtype.type(EPS)
    norms = []
    for r, c in _NORM_OFFSETS:
        box = (energy[r:r + oh, c:c + ow] + energy[r:r + oh, c + 1:c + 1 + ow]
               + energy[r + 1:r + 1 + oh, c:c + ow]
               + energy[r + 1:r + 1 + oh, c + 1:c + 1 + ow])
        norms.append(energy.dtype.type(1) / np.sqrt(box + eps))
    return norms


def _assemble(cells: np.ndarray, center: np.ndarray, norms: List[np.ndarray]) -> None:
    """Write the normalized features of every output cell into ``cells``."""
    work = cells.dtype
    trunc = work.type(TRUNCATION)
    scale = work.type(0.5)
    half = NORIENT // 2

    def clipped(values):
        return [np.minimum(values * n, trunc) for n in norms]

    def average(h):
        return scale * ((h[0] + h[1] + h[2] + h[3]) / work.type(4))

    t = [np.zeros(center.shape[:2], dtype=work) for _ in norms]
    for o in range(NORIENT):
        h = clipped(center[..., o])
        cells[..., SENSITIVE_OFFSET + o] = average(h)
        for k in range(4):
            t[k] += h[k]

    for o in range(half):
        h = clipped(center[..., o] + center[..., o + half])
        cells[..., INSENSITIVE_OFFSET + o] = average(h)

    for k in range(4):
        cells[..., TEXTURE_OFFSET + k] = work.type(TEXTURE_WEIGHT) * t[k]

    cells[..., TRUNCATION_OFFSET] = 0


def compute_features(image: np.ndarray, binsize: int = BINSIZE,
                     dtype=np.float64, planar: bool = False) -> np.ndarray:
    """Compute the HOG feature map of one image.

    The output is a 3D (rows, cols, FLEN) grid flattened to
    ``(rows, cols * FLEN)``. Rows and cols are ``round(size / binsize) - 2``,
    clamped at zero; images too small for one interior cell give an empty map.

    Args:
        image: (H, W), (H, W, 1) or (H, W, 3) array of uint8, uint16, float32
            or float64 samples; (C, H, W) with ``planar=True``.
        binsize: Cell side in pixels.
        dtype: Working and output precision, float32 or float64.
        planar: Channels are stored on the first axis.

    Returns:
        Feature map of the working type.

    Raises:
        UnsupportedFormat: Unsupported element type, channel count or
            working type.
    """
    samples = read_samples(image, dtype, planar=planar)
    blocks, outsize = feature_shape(samples.shape, binsize)
    feat = np.zeros((outsize[0], outsize[1] * FLEN), dtype=samples.dtype)
    if outsize[0] == 0 or outsize[1] == 0:
        return feat

    hist = _histograms(samples, blocks, binsize)
    norms = _normalizers(_block_energy(hist), outsize)
    center = hist[1:outsize[0] + 1, 1:outsize[1] + 1]
    _assemble(feat.reshape(outsize[0], outsize[1], FLEN), center, norms)
    return feat
