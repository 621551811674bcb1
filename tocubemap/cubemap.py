"""
cubemap.py — Face images and the six-face result of a conversion.
"""

from dataclasses import dataclass

import numpy as np

from .faces import Face


@dataclass
class FaceImage:
    """A square RGBA8 image tagged with the cube face it shows."""

    face: Face
    pixels: np.ndarray

    def __post_init__(self):
        self.face = Face(self.face)
        shape = self.pixels.shape
        if (self.pixels.ndim != 3 or shape[0] != shape[1] or shape[2] != 4
                or self.pixels.dtype != np.uint8):
            raise ValueError(f"face {self.face} must be a square RGBA8 image, "
                             f"got {shape} {self.pixels.dtype}")

    @property
    def size(self) -> int:
        return self.pixels.shape[0]


@dataclass
class CubemapResult:
    """Exactly six FaceImages of one common size, looked up by Face."""

    faces: dict[Face, FaceImage]

    def __post_init__(self):
        if set(self.faces) != set(Face):
            missing = sorted(str(f) for f in set(Face) - set(self.faces))
            raise ValueError(f"cubemap needs all six faces, missing: {missing}")
        sizes = {img.size for img in self.faces.values()}
        if len(sizes) != 1:
            raise ValueError(f"cube faces differ in size: {sorted(sizes)}")

    @property
    def size(self) -> int:
        return next(iter(self.faces.values())).size

    def __getitem__(self, face: Face) -> FaceImage:
        return self.faces[Face(face)]

    def __iter__(self):
        return iter(self.faces.values())

    def __len__(self) -> int:
        return len(self.faces)

