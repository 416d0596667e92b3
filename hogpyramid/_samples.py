"""Sample readers: source element types to the working float type.

One reader per supported source element type. The feature pipeline is
written once against the working type; the reader picked here is the only
place that knows about the source type.
"""

from typing import Callable, Dict

import numpy as np

from ._errors import UnsupportedFormat

__all__ = ["SOURCE_DTYPES", "WORKING_DTYPES", "sample_reader", "working_dtype",
           "read_samples", "check_image"]


def _read_unsigned(image: np.ndarray, work: np.dtype) -> np.ndarray:
    # Integer samples are widened before any subtraction happens.
    return image.astype(work)


def _read_float(image: np.ndarray, work: np.dtype) -> np.ndarray:
    return image.astype(work, copy=image.dtype != work)


_READERS: Dict[np.dtype, Callable[[np.ndarray, np.dtype], np.ndarray]] = {
    np.dtype(np.uint8): _read_unsigned,
    np.dtype(np.uint16): _read_unsigned,
    np.dtype(np.float32): _read_float,
    np.dtype(np.float64): _read_float,
}

SOURCE_DTYPES = tuple(_READERS)
WORKING_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))


def sample_reader(dtype) -> Callable[[np.ndarray, np.dtype], np.ndarray]:
    """Return the reader for a source element type.

    Raises:
        UnsupportedFormat: If ``dtype`` is not uint8, uint16, float32 or float64.
    """
    dtype = np.dtype(dtype)
    try:
        return _READERS[dtype]
    except KeyError:
        raise UnsupportedFormat(
            f"Unsupported image type {dtype}; expected one of "
            f"{[str(d) for d in SOURCE_DTYPES]}"
        ) from None


def working_dtype(dtype) -> np.dtype:
    """Validate and normalize a working precision (float32 or float64)."""
    try:
        dtype = np.dtype(dtype)
    except TypeError:
        raise UnsupportedFormat(f"Unsupported working type {dtype!r}") from None
    if dtype not in WORKING_DTYPES:
        raise UnsupportedFormat(
            f"Unsupported working type {dtype}; expected float32 or float64"
        )
    return dtype


def check_image(image: np.ndarray, planar: bool = False) -> np.ndarray:
    """Validate element type and layout, returning an interleaved (H, W, C) view.

    Args:
        image: (H, W), (H, W, C) or, with ``planar``, (C, H, W) samples.
        planar: Channels are stored on the first axis.

    Raises:
        UnsupportedFormat: Unsupported element type or channel count.
    """
    image = np.asarray(image)
    sample_reader(image.dtype)

    if image.ndim == 2:
        image = image[:, :, np.newaxis]
    elif image.ndim == 3:
        if planar:
            image = np.moveaxis(image, 0, -1)
    else:
        raise UnsupportedFormat(
            f"Image must be 2D or 3D, got shape {image.shape}"
        )

    if image.shape[-1] not in (1, 3):
        raise UnsupportedFormat(
            f"Image must have 1 or 3 channels, got {image.shape[-1]}"
        )
    return image


def read_samples(image: np.ndarray, dtype=np.float64,
                 planar: bool = False) -> np.ndarray:
    """Convert an image to a contiguous (H, W, C) array of the working type."""
    work = working_dtype(dtype)
    image = check_image(image, planar=planar)
    return np.ascontiguousarray(sample_reader(image.dtype)(image, work))
