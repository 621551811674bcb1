"""tocubemap — convert equirectangular panoramas into cubemap faces."""

__version__ = '0.3.0'

from .cubemap import CubemapResult, FaceImage
from .engine import ConvertOptions, convert
from .errors import (AspectRatioError, CubemapError, InputDecodeError, InputOpenError,
                     OutputDirError, OutputEncodeError)
from .faces import Face
from .sampler import Interpolation

__all__ = [
    'AspectRatioError', 'ConvertOptions', 'CubemapError', 'CubemapResult', 'Face',
    'FaceImage', 'InputDecodeError', 'InputOpenError', 'Interpolation',
    'OutputDirError', 'OutputEncodeError', 'convert',
]
