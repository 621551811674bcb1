"""
engine.py — Equirectangular panorama → six cube faces.

convert() prepares the source once (tone mapping / RGBA8 conversion), then
projects the six faces independently on a thread pool.  Every face is built
as whole numpy arrays:

    face pixel grid → direction D → normalise → (θ, φ) → (u, v) → sample

The source array is only ever read, so the workers share it freely.
"""

import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from .cubemap import CubemapResult, FaceImage
from .errors import AspectRatioError
from .faces import Face, face_directions
from .reorient import rotate_for_z_up
from .sampler import Interpolation, sample
from .tonemap import prepare_source
from .vector import SphericalAngle, normalize

DEFAULT_SIZE = 512
DEFAULT_EXPOSURE = 1.0
MAX_WORKERS = len(Face)


@dataclass(frozen=True)
class ConvertOptions:
    size: int = DEFAULT_SIZE
    interpolation: Interpolation = Interpolation.LINEAR
    tone_mapping: bool = False
    exposure: float = DEFAULT_EXPOSURE
    rotate_for_z_up: bool = False
    wrap: bool = False
    workers: int | None = None

    def __post_init__(self):
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size <= 0:
            raise ValueError(f"size must be a positive integer, got {self.size!r}")
        if not (math.isfinite(self.exposure) and self.exposure > 0):
            raise ValueError(f"exposure must be a positive finite number, got {self.exposure!r}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers!r}")
        # Accept plain strings ('linear' / 'nearest') as well as the enum
        object.__setattr__(self, 'interpolation', Interpolation(self.interpolation))


def check_aspect(width: int, height: int) -> None:
    """Raise AspectRatioError unless width == 2 × height."""
    if width != 2 * height:
        raise AspectRatioError(width, height)


def project_face(rgba: np.ndarray, face: Face, size: int,
                 interpolation: Interpolation = Interpolation.LINEAR,
                 wrap: bool = False) -> FaceImage:
    """
    Project an RGBA8 equirectangular image onto one cube face.

    Args:
        rgba:          (H, W, 4) uint8 source, W == 2·H
        face:          which face to render
        size:          output face side length in pixels
        interpolation: sampler mode
        wrap:          wrap U periodically instead of clamping

    Returns:
        FaceImage of size × size pixels
    """
    direction = normalize(face_directions(face, size))
    u, v = SphericalAngle.from_unit(direction).to_uv()
    del direction

    pixels = sample(rgba, u, v, interpolation, wrap=wrap)
    return FaceImage(face, pixels)


def _worker_count(options: ConvertOptions) -> int:
    if options.workers is not None:
        return min(options.workers, MAX_WORKERS)
    return max(1, min(os.cpu_count() or 1, MAX_WORKERS))


def convert(source: np.ndarray, options: ConvertOptions | None = None) -> CubemapResult:
    """
    Convert a decoded equirectangular image into a cubemap.

    Args:
        source:  (H, W, 3|4) array, uint8 or float; never modified
        options: ConvertOptions, defaults if omitted

    Returns:
        CubemapResult holding the six faces, rotated for Z-up when
        options.rotate_for_z_up is set
    """
    options = options or ConvertOptions()
    if source.ndim != 3 or source.shape[2] not in (3, 4):
        raise ValueError(f"expected an (H, W, 3|4) image, got shape {source.shape}")
    H, W = source.shape[:2]
    check_aspect(W, H)

    rgba = prepare_source(source, options.tone_mapping, options.exposure)

    with ThreadPoolExecutor(max_workers=_worker_count(options)) as pool:
        futures = {
            face: pool.submit(project_face, rgba, face, options.size,
                              options.interpolation, options.wrap)
            for face in Face
        }
        faces = {face: fut.result() for face, fut in futures.items()}

    result = CubemapResult(faces)
    if options.rotate_for_z_up:
        result = rotate_for_z_up(result)
    return result
