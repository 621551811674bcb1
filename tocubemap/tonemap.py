"""
tonemap.py — Bring decoded source pixels into the engine's RGBA8 format.

Float (HDR) sources can be compressed with Reinhard tone mapping,

    c' = (c·e) / (1 + c·e)

per colour channel for exposure e.  Integer sources are already 8-bit and
pass through untouched whatever the tone-mapping flag says.
"""

import numpy as np

# Tone-mapped colour never reaches full white; 254 is the brightest code
REINHARD_MAX_CODE = 254


def _validate(pixels: np.ndarray) -> None:
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"expected an (H, W, 3|4) image, got shape {pixels.shape}")


def _to_code(values: np.ndarray, upper: int) -> np.ndarray:
    """[0, 1] floats → uint8 codes, rounding halves up."""
    codes = np.floor(values * np.float32(255.0) + np.float32(0.5))
    return np.clip(np.nan_to_num(codes, nan=0.0), 0, upper).astype(np.uint8)


def _alpha_channel(pixels: np.ndarray) -> np.ndarray:
    H, W = pixels.shape[:2]
    if pixels.shape[2] == 4:
        return _to_code(pixels[:, :, 3].astype(np.float32), 255)
    return np.full((H, W), 255, dtype=np.uint8)


def reinhard(pixels: np.ndarray, exposure: float = 1.0) -> np.ndarray:
    """
    Reinhard-compress a float RGB/RGBA image to RGBA8.

    Args:
        pixels:   (H, W, 3|4) float array of linear radiance
        exposure: multiplier applied before compression, > 0

    Returns:
        (H, W, 4) uint8 array; alpha is round(a·255), or 255 for RGB input
    """
    _validate(pixels)
    if not exposure > 0:
        raise ValueError(f"exposure must be positive, got {exposure}")

    rgb = np.maximum(pixels[:, :, :3].astype(np.float32) * np.float32(exposure),
                     np.float32(0.0))
    mapped = rgb / (np.float32(1.0) + rgb)
    del rgb

    out = np.empty(pixels.shape[:2] + (4,), dtype=np.uint8)
    out[:, :, :3] = _to_code(mapped, REINHARD_MAX_CODE)
    out[:, :, 3] = _alpha_channel(pixels)
    return out


def to_rgba8(pixels: np.ndarray) -> np.ndarray:
    """
    Convert an RGB/RGBA image of any dtype to RGBA8 without tone mapping.

    uint8 data is only padded with an opaque alpha channel.  Floats are taken
    as [0, 1] and clamped.  Other integer types are scaled from their full
    range.
    """
    _validate(pixels)

    if pixels.dtype == np.uint8:
        if pixels.shape[2] == 4:
            return np.ascontiguousarray(pixels)
        out = np.empty(pixels.shape[:2] + (4,), dtype=np.uint8)
        out[:, :, :3] = pixels
        out[:, :, 3] = 255
        return out

    if np.issubdtype(pixels.dtype, np.integer):
        scale = np.float32(np.iinfo(pixels.dtype).max)
        pixels = pixels.astype(np.float32) / scale

    out = np.empty(pixels.shape[:2] + (4,), dtype=np.uint8)
    out[:, :, :3] = _to_code(pixels[:, :, :3].astype(np.float32), 255)
    out[:, :, 3] = _alpha_channel(pixels)
    return out


def is_float_image(pixels: np.ndarray) -> bool:
    return np.issubdtype(pixels.dtype, np.floating)


def prepare_source(pixels: np.ndarray, tone_mapping: bool = False,
                   exposure: float = 1.0) -> np.ndarray:
    """Return the RGBA8 image the sampler reads from."""
    if tone_mapping and is_float_image(pixels):
        return reinhard(pixels, exposure)
    return to_rgba8(pixels)
