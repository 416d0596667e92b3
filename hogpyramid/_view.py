"""Strided (row, cell, channel) view over a flattened feature buffer.

Feature maps and filters are stored as 2D arrays of shape
``(rows, cells * depth)``. ``FeatureView`` checks that layout once and then
exposes the same memory as a ``(rows, cells, depth)`` tensor.
"""

from typing import Tuple

import numpy as np

from ._constants import FLEN
from ._errors import PreconditionViolation

__all__ = ["FeatureView", "grid_shape"]


def grid_shape(shape: Tuple[int, ...], depth: int = FLEN) -> Tuple[int, int]:
    """Return ``(rows, cells)`` of a flattened or tensor layout.

    Raises:
        PreconditionViolation: If the column count is not a multiple of
            ``depth`` or a 3D tensor's last axis is not ``depth``.
    """
    shape = tuple(shape)
    if len(shape) == 3:
        if shape[2] != depth:
            raise PreconditionViolation(
                f"Channel depth {shape[2]} does not match stride {depth}"
            )
        return shape[0], shape[1]
    if len(shape) == 2:
        if shape[1] % depth != 0:
            raise PreconditionViolation(
                f"Column count {shape[1]} is not a multiple of stride {depth}"
            )
        return shape[0], shape[1] // depth
    raise PreconditionViolation(f"Expected a 2D or 3D array, got shape {shape}")


class FeatureView:
    """Zero-copy 3D view of a flattened feature map or filter.

    Args:
        array: ``(rows, cells * depth)`` buffer or ``(rows, cells, depth)`` tensor.
        depth: Channels per cell (the column stride of the flattened layout).

    Raises:
        PreconditionViolation: If the column count is not a multiple of
            ``depth`` or a 3D tensor's last axis is not ``depth``.
    """

    def __init__(self, array: np.ndarray, depth: int = FLEN):
        if depth < 1:
            raise ValueError(f"depth must be >= 1, got {depth}")
        array = np.asarray(array)
        rows, cells = grid_shape(array.shape, depth)
        self._tensor = np.ascontiguousarray(array).reshape(rows, cells, depth)
        self._depth = depth

    @property
    def rows(self) -> int:
        return self._tensor.shape[0]

    @property
    def cells(self) -> int:
        """Number of cells per row."""
        return self._tensor.shape[1]

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def dtype(self) -> np.dtype:
        return self._tensor.dtype

    @property
    def tensor(self) -> np.ndarray:
        """``(rows, cells, depth)`` view."""
        return self._tensor

    @property
    def flat(self) -> np.ndarray:
        """``(rows, cells * depth)`` view over the same memory."""
        return self._tensor.reshape(self.rows, self.cells * self._depth)

    def cell(self, y: int, x: int) -> np.ndarray:
        """Feature vector of cell ``(y, x)``."""
        return self._tensor[y, x]

    def crop(self, top: int, bottom: int, left: int, right: int) -> "FeatureView":
        """Interior without ``top``/``bottom`` rows and ``left``/``right`` cells."""
        return FeatureView(
            self._tensor[top:self.rows - bottom, left:self.cells - right],
            self._depth,
        )

    def __repr__(self):
        return (f"FeatureView(rows={self.rows}, cells={self.cells}, "
                f"depth={self._depth}, dtype={self.dtype})")
