"""
sampler.py — Nearest and bilinear lookup of an RGBA8 image at normalised UV.

Both modes take whole UV grids and return an (..., 4) uint8 array.  UV
outside [0, 1] (or NaN) is a miss and yields MISS_PIXEL.  Sample indices are
clamped to the image; by default U is clamped as well, which leaves a
one-pixel seam on the back face.  With wrap=True U is treated as periodic.
"""

from enum import Enum

import numpy as np

MISS_PIXEL = np.array([0, 0, 0, 255], dtype=np.uint8)


class Interpolation(str, Enum):
    LINEAR = 'linear'
    NEAREST = 'nearest'

    def __str__(self) -> str:
        return self.value


def _miss_mask(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    # Written as a negated range test so NaN counts as a miss too
    return ~((u >= 0.0) & (u <= 1.0) & (v >= 0.0) & (v <= 1.0))


def _to_pixels(u: np.ndarray, v: np.ndarray, W: int, H: int, wrap: bool):
    """UV → continuous source pixel coordinates."""
    if wrap:
        # Pixel centres sit at (i + ½) / W so the last column neighbours the first
        px = np.mod(u * np.float32(W) - np.float32(0.5), np.float32(W))
    else:
        px = u * np.float32(W - 1)
    py = v * np.float32(H - 1)
    return px, py


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + np.float32(0.5))


def sample_nearest(img: np.ndarray, u: np.ndarray, v: np.ndarray,
                   wrap: bool = False) -> np.ndarray:
    """Pick the pixel at (round(u·(W−1)), round(v·(H−1)))."""
    H, W = img.shape[:2]
    px, py = _to_pixels(u, v, W, H, wrap)

    x = _round_half_up(px).astype(np.int64)
    y = _round_half_up(py).astype(np.int64)
    x = x % W if wrap else np.clip(x, 0, W - 1)
    y = np.clip(y, 0, H - 1)

    # copy: 0-d indices would otherwise hand back a view into img
    return img[y, x].copy()


def sample_linear(img: np.ndarray, u: np.ndarray, v: np.ndarray,
                  wrap: bool = False) -> np.ndarray:
    """Bilinear blend of the four integer-coordinate neighbours."""
    H, W = img.shape[:2]
    px, py = _to_pixels(u, v, W, H, wrap)

    x0 = np.floor(px).astype(np.int64)
    y0 = np.floor(py).astype(np.int64)
    wx = (px - x0.astype(np.float32))   # horizontal fractional weight
    wy = (py - y0.astype(np.float32))   # vertical fractional weight
    del px, py

    if wrap:
        x1 = (x0 + 1) % W
        x0 = x0 % W
    else:
        x1 = np.clip(x0 + 1, 0, W - 1)
        x0 = np.clip(x0, 0, W - 1)
    y1 = np.clip(y0 + 1, 0, H - 1)
    y0 = np.clip(y0, 0, H - 1)

    c00 = img[y0, x0].astype(np.float32)
    c10 = img[y0, x1].astype(np.float32)
    c01 = img[y1, x0].astype(np.float32)
    c11 = img[y1, x1].astype(np.float32)
    del x0, x1, y0, y1

    # Expand weights to broadcast over RGBA channels
    wx = wx[..., np.newaxis]
    wy = wy[..., np.newaxis]
    iwx = np.float32(1.0) - wx
    iwy = np.float32(1.0) - wy

    result = c00 * iwx * iwy + c10 * wx * iwy + c01 * iwx * wy + c11 * wx * wy
    del c00, c10, c01, c11, wx, wy, iwx, iwy

    return np.clip(_round_half_up(result), 0, 255).astype(np.uint8)


_SAMPLERS = {
    Interpolation.NEAREST: sample_nearest,
    Interpolation.LINEAR: sample_linear,
}


def sample(img: np.ndarray, u, v, interpolation: Interpolation = Interpolation.LINEAR,
           wrap: bool = False) -> np.ndarray:
    """
    Sample *img* at normalised coordinates.

    Args:
        img:           (H, W, 4) uint8 RGBA source
        u, v:          float scalars or equally shaped float arrays
        interpolation: Interpolation.NEAREST or Interpolation.LINEAR
        wrap:          treat U as periodic instead of clamping it

    Returns:
        uint8 array of shape u.shape + (4,); misses are MISS_PIXEL
    """
    if img.ndim != 3 or img.shape[2] != 4 or img.dtype != np.uint8:
        raise ValueError(f"expected an (H, W, 4) uint8 image, got {img.shape} {img.dtype}")

    u = np.asarray(u, dtype=np.float32)
    v = np.asarray(v, dtype=np.float32)
    miss = _miss_mask(u, v)

    # Park misses at the origin so the lookup stays in bounds, then overwrite them
    safe_u = np.where(miss, np.float32(0.0), u)
    safe_v = np.where(miss, np.float32(0.0), v)
    result = _SAMPLERS[Interpolation(interpolation)](img, safe_u, safe_v, wrap)
    result[miss] = MISS_PIXEL
    return result
