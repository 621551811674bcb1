"""
vector.py — 3-D direction algebra and the equirectangular parameterisation.

Vec3 components are float32 and may be plain scalars or equally shaped numpy
arrays; the same code therefore handles a single direction or a whole face
grid at once.

Coordinate system (as used by the face table in faces.py):
    +X = front   +Y = left   +Z = down
"""

import math
from typing import NamedTuple

import numpy as np

PI32 = np.float32(math.pi)
TWO_PI32 = np.float32(2.0) * PI32
HALF32 = np.float32(0.5)


class Vec3(NamedTuple):
    x: np.ndarray | np.float32
    y: np.ndarray | np.float32
    z: np.ndarray | np.float32

    @classmethod
    def of(cls, x, y, z) -> 'Vec3':
        """Build a Vec3 with every component coerced to float32."""
        return cls(np.float32(x) if np.isscalar(x) else np.asarray(x, dtype=np.float32),
                   np.float32(y) if np.isscalar(y) else np.asarray(y, dtype=np.float32),
                   np.float32(z) if np.isscalar(z) else np.asarray(z, dtype=np.float32))

    def length(self):
        return np.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


def normalize(v: Vec3) -> Vec3:
    """Return *v* scaled to unit length.  Callers guarantee |v| > 0."""
    norm = v.length()
    if np.any(norm == 0):
        raise ZeroDivisionError("cannot normalise a zero-length vector")
    return Vec3(v.x / norm, v.y / norm, v.z / norm)


class SphericalAngle(NamedTuple):
    """Direction without radius: azimuth *theta* ∈ [-π, π], elevation *phi* ∈ [-π/2, π/2]."""

    theta: np.ndarray | np.float32
    phi: np.ndarray | np.float32

    @classmethod
    def from_unit(cls, v: Vec3) -> 'SphericalAngle':
        # z is clipped: drift can push |z| a hair above 1 and asin would return NaN
        theta = np.arctan2(v.y, v.x).astype(np.float32)
        phi = np.arcsin(np.clip(v.z, -1.0, 1.0)).astype(np.float32)
        return cls(theta, phi)

    def to_uv(self):
        """
        Map to equirectangular texture coordinates.

        u = θ / 2π + ½ runs along longitude, v = φ / π + ½ along latitude.
        Both land in [0, 1]; u = 0 and u = 1 are the same meridian (the ±π seam).
        """
        u = self.theta / TWO_PI32 + HALF32
        v = self.phi / PI32 + HALF32
        return u, v


def direction_to_uv(d: Vec3):
    """Normalise an arbitrary non-zero direction and return its (u, v)."""
    return SphericalAngle.from_unit(normalize(d)).to_uv()
