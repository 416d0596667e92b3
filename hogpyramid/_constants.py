"""Shared constants for the hogpyramid package.

Values fixed by the feature layout: every cell of every feature map and every
filter channel uses the same 32-element vector.
"""

import numpy as np

# Orientation bins: 9 unsigned orientations, each split by gradient sign.
NORIENT = 18

# Per-cell feature vector: 18 contrast-sensitive + 9 contrast-insensitive
# + 4 texture energies + 1 truncation slot.
FLEN = NORIENT + NORIENT // 2 + 4 + 1

# Offsets of each feature group inside a cell.
SENSITIVE_OFFSET = 0
INSENSITIVE_OFFSET = NORIENT
TEXTURE_OFFSET = NORIENT + NORIENT // 2
TRUNCATION_OFFSET = FLEN - 1

# Pixels per cell side.
BINSIZE = 8

# Default number of pyramid levels.
NSCALES = 10

# Added to block energies before the square root so flat regions stay finite.
EPS = 1e-4

# Clipping threshold for normalized histogram values.
TRUNCATION = 0.2

# Weight applied to the per-normalizer sums of clipped values.
TEXTURE_WEIGHT = 0.2357

# Unit vectors at 20 degree spacing over a half circle (x, y components).
UU = np.array([1.0000, 0.9397, 0.7660, 0.5000, 0.1736,
               -0.1736, -0.5000, -0.7660, -0.9397])
VV = np.array([0.0000, 0.3420, 0.6428, 0.8660, 0.9848,
               0.9848, 0.8660, 0.6428, 0.3420])
