"""Exception types raised by hogpyramid."""

__all__ = ["HOGError", "UnsupportedFormat", "PreconditionViolation"]


class HOGError(Exception):
    """Base class for hogpyramid errors."""


class UnsupportedFormat(HOGError, TypeError):
    """Image element type, channel count or working precision is not supported.

    Supported source types are uint8, uint16, float32 and float64 with 1 or 3
    channels; supported working types are float32 and float64.
    """


class PreconditionViolation(HOGError, AssertionError):
    """A feature map or filter does not match the expected cell stride.

    Indicates a filter bank built for a different feature length than the
    extractor produces. Never recovered from.
    """
