"""Image resampling and border padding used by the pyramid builder.

Resizing and 2x smoothed downsampling go through OpenCV; constant borders
go through ``np.pad``. All functions return new arrays and keep the channel
axis of ``(H, W, 1)`` inputs.
"""

from typing import Tuple

import cv2
import numpy as np

__all__ = ["resize", "rescale", "downsample_half", "pad_border", "scaled_size"]


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


def _restore_channels(out: np.ndarray, like: np.ndarray) -> np.ndarray:
    # cv2 drops a trailing singleton channel axis.
    if like.ndim == 3 and out.ndim == 2:
        out = out[:, :, np.newaxis]
    return out


def scaled_size(shape: Tuple[int, ...], factor: float) -> Tuple[int, int]:
    """Return the ``(width, height)`` of an image of ``shape`` scaled by ``factor``.

    Sizes are rounded to the nearest pixel and never drop below 1.
    """
    if factor <= 0:
        raise ValueError(f"Scale factor must be > 0, got {factor}")
    h, w = shape[:2]
    return (max(_round_half_up(w * factor), 1),
            max(_round_half_up(h * factor), 1))


def resize(image: np.ndarray, size: Tuple[int, int],
           interpolation: int = cv2.INTER_LINEAR) -> np.ndarray:
    """Resize an image to ``size = (width, height)``.

    Args:
        image: (H, W) or (H, W, C) array of any OpenCV-supported depth.
        size: Target (width, height), both >= 1.
        interpolation: OpenCV interpolation flag.

    Returns:
        Resized image with the same dtype and channel layout.
    """
    width, height = int(size[0]), int(size[1])
    if width < 1 or height < 1:
        raise ValueError(f"Target size must be positive, got {size}")
    if image.shape[:2] == (height, width):
        return image.copy()
    out = cv2.resize(np.ascontiguousarray(image), (width, height),
                     interpolation=interpolation)
    return _restore_channels(out, image)


def rescale(image: np.ndarray, factor: float,
            interpolation: int = cv2.INTER_LINEAR) -> np.ndarray:
    """Resize an image by an arbitrary factor."""
    return resize(image, scaled_size(image.shape, factor), interpolation)


def downsample_half(image: np.ndarray) -> np.ndarray:
    """Gaussian-smooth and downsample by 2 (``cv2.pyrDown``).

    Output size is ``((W + 1) // 2, (H + 1) // 2)``.
    """
    out = cv2.pyrDown(np.ascontiguousarray(image))
    return _restore_channels(out, image)


def pad_border(grid: np.ndarray, top: int, bottom: int, left: int, right: int,
               value: float = 0) -> np.ndarray:
    """Surround a 2D grid with a constant-valued border.

    Works on empty grids, which then become all-border.
    """
    if min(top, bottom, left, right) < 0:
        raise ValueError(
            f"Border widths must be >= 0, got {(top, bottom, left, right)}"
        )
    return np.pad(grid, ((top, bottom), (left, right)), mode="constant",
                  constant_values=value)
