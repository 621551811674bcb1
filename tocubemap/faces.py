"""
faces.py — Cube faces and the mapping from face pixels to 3-D directions.

For output pixel (x, y) on a face of side S let

    a = x / S − ½      (column, grows to the right)
    b = y / S − ½      (row, grows downwards)

Each face is described by a basis triple (origin, du, dv) and the direction
is D = origin + a·du + b·dv:

    front   ( +½,  +a,  +b )        back    ( −½,  −a,  +b )
    left    ( −a,  +½,  +b )        right   ( +a,  −½,  +b )
    top     ( +a,  −b,  −½ )        bottom  ( +a,  +b,  +½ )

Coordinate system: +X = front, +Y = left, +Z = down (out of the bottom face).
D is not unit length; normalise before converting to spherical angles.
"""

from enum import Enum

import numpy as np

from .vector import Vec3


class Face(str, Enum):
    FRONT = 'front'
    BACK = 'back'
    LEFT = 'left'
    RIGHT = 'right'
    TOP = 'top'
    BOTTOM = 'bottom'

    def __str__(self) -> str:
        return self.value


# face → (origin, du, dv)
FACE_BASIS: dict[Face, tuple[tuple[float, float, float], ...]] = {
    Face.FRONT:  ((+0.5, 0.0, 0.0), (0.0, +1.0, 0.0), (0.0, 0.0, +1.0)),
    Face.BACK:   ((-0.5, 0.0, 0.0), (0.0, -1.0, 0.0), (0.0, 0.0, +1.0)),
    Face.LEFT:   ((0.0, +0.5, 0.0), (-1.0, 0.0, 0.0), (0.0, 0.0, +1.0)),
    Face.RIGHT:  ((0.0, -0.5, 0.0), (+1.0, 0.0, 0.0), (0.0, 0.0, +1.0)),
    Face.TOP:    ((0.0, 0.0, -0.5), (+1.0, 0.0, 0.0), (0.0, -1.0, 0.0)),
    Face.BOTTOM: ((0.0, 0.0, +0.5), (+1.0, 0.0, 0.0), (0.0, +1.0, 0.0)),
}


def _combine(face: Face, a, b) -> Vec3:
    origin, du, dv = FACE_BASIS[Face(face)]
    # origin is added first: a zero offset then comes out as +0.0, never −0.0,
    # which keeps atan2 on the +π side of the seam
    return Vec3(*(np.float32(o) + a * np.float32(i) + b * np.float32(j)
                  for o, i, j in zip(origin, du, dv)))


def face_direction(face: Face, x: float, y: float, size: int) -> Vec3:
    """Direction through pixel (x, y) of *face* (not normalised)."""
    s = np.float32(size)
    a = np.float32(x) / s - np.float32(0.5)
    b = np.float32(y) / s - np.float32(0.5)
    return _combine(face, a, b)


def face_directions(face: Face, size: int) -> Vec3:
    """
    Directions for every pixel of a face at once.

    Returns:
        Vec3 whose components are (size, size) float32 arrays indexed [y, x]
    """
    if size <= 0:
        raise ValueError(f"face size must be positive, got {size}")

    steps = np.arange(size, dtype=np.float32) / np.float32(size) - np.float32(0.5)
    aa, bb = np.meshgrid(steps, steps)   # aa varies along x (columns), bb along y (rows)
    del steps
    return _combine(face, aa, bb)
