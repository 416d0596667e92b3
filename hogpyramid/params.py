"""Extractor configuration and its JSON sidecar format.

A sidecar looks like::

    {
      "binsize": 8,
      "nscales": 10,
      "dtype": "float32",
      "nthreads": 4
    }

Missing keys take the defaults below.
"""

import json
from dataclasses import asdict, dataclass, fields
from typing import Optional

import numpy as np

from ._constants import BINSIZE, FLEN, NSCALES
from ._samples import working_dtype

__all__ = ["HOGParams"]


@dataclass
class HOGParams:
    """Parameters shared by every level of one pyramid.

    ``nthreads=None`` lets the thread pool pick its worker count.
    """
    binsize: int = BINSIZE
    nscales: int = NSCALES
    dtype: str = "float64"
    nthreads: Optional[int] = None

    def __post_init__(self):
        if int(self.binsize) < 1:
            raise ValueError(f"binsize must be >= 1, got {self.binsize}")
        if int(self.nscales) < 0:
            raise ValueError(f"nscales must be >= 0, got {self.nscales}")
        if self.nthreads is not None and int(self.nthreads) < 1:
            raise ValueError(f"nthreads must be >= 1 or None, got {self.nthreads}")
        self.binsize = int(self.binsize)
        self.nscales = int(self.nscales)
        self.dtype = working_dtype(self.dtype).name

    @property
    def flen(self) -> int:
        """Feature vector length per cell."""
        return FLEN

    @property
    def working_dtype(self) -> np.dtype:
        return np.dtype(self.dtype)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "HOGParams":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown HOG parameters: {unknown}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: str) -> "HOGParams":
        """Load parameters from a JSON sidecar file."""
        with open(path, "r") as f:
            return cls.from_dict(json.load(f))

    def save_json(self, path: str) -> None:
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write("\n")
