"""hogpyramid — Multi-scale HOG feature pyramids and part-filter responses."""

import logging

from ._constants import FLEN, NORIENT
from ._errors import HOGError, UnsupportedFormat, PreconditionViolation
from ._view import FeatureView
from .features import compute_features
from .hog_features import HOGFeatures
from .params import HOGParams
from .pyramid import FeaturePyramid, PyramidLevel, build_pyramid
from .response import convolve, pdf

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["HOGFeatures", "HOGParams", "FeaturePyramid", "PyramidLevel",
           "FeatureView", "compute_features", "build_pyramid", "convolve", "pdf",
           "HOGError", "UnsupportedFormat", "PreconditionViolation",
           "FLEN", "NORIENT"]
