"""
errors.py — Exceptions raised by tocubemap.

Every fatal condition of a conversion run derives from CubemapError, so the
CLI can report any of them with a single handler.  Out-of-range samples are
not errors: the sampler substitutes MISS_PIXEL and carries on.
"""


class CubemapError(Exception):
    """Base class for all fatal conversion errors."""


class InputOpenError(CubemapError):
    """Input path is missing or cannot be read."""


class InputDecodeError(CubemapError):
    """Input bytes are not a recognised image."""


class AspectRatioError(CubemapError, ValueError):
    """Source width is not exactly twice its height."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(
            f"image width should be exactly 2 times the image height "
            f"(got {width} × {height} px)")


class OutputDirError(CubemapError):
    """Output directory cannot be created."""


class OutputEncodeError(CubemapError):
    """Encoding or writing a face file failed."""
