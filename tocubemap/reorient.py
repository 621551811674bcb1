"""
reorient.py — Rotate faces for a Z-up skybox used in a Y-up renderer.

Rotations are exact 90° multiples done with np.rot90, so no pixel is
resampled.  Angles are clockwise.
"""

import numpy as np

from .cubemap import CubemapResult, FaceImage
from .faces import Face

# face → clockwise rotation in degrees
Z_UP_ROTATIONS: dict[Face, int] = {
    Face.TOP: 0,
    Face.BOTTOM: 180,
    Face.LEFT: 180,
    Face.RIGHT: 0,
    Face.FRONT: 270,   # i.e. 90° counter-clockwise
    Face.BACK: 90,
}


def rotate_face(face_img: FaceImage, degrees: int) -> FaceImage:
    """Rotate a face clockwise by a multiple of 90°."""
    if degrees % 90:
        raise ValueError(f"rotation must be a multiple of 90°, got {degrees}")
    quarter_turns = (degrees // 90) % 4
    if quarter_turns == 0:
        return face_img
    # np.rot90 turns counter-clockwise for positive k
    pixels = np.ascontiguousarray(np.rot90(face_img.pixels, k=-quarter_turns))
    return FaceImage(face_img.face, pixels)


def rotate_for_z_up(result: CubemapResult) -> CubemapResult:
    return CubemapResult({
        face_img.face: rotate_face(face_img, Z_UP_ROTATIONS[face_img.face])
        for face_img in result
    })
