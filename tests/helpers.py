import cv2
import numpy as np

from tocubemap.cubemap import CubemapResult, FaceImage
from tocubemap.faces import Face


def solid(width, height, color, dtype=np.uint8):
    """(height, width, len(color)) image filled with one colour."""
    img = np.empty((height, width, len(color)), dtype=dtype)
    img[:, :] = color
    return img


def checker(width, height):
    """1-pixel black/white checkerboard, RGBA8."""
    yy, xx = np.mgrid[0:height, 0:width]
    values = ((xx + yy) % 2 * 255).astype(np.uint8)
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[:, :, :3] = values[:, :, np.newaxis]
    img[:, :, 3] = 255
    return img


def numbered_cubemap(size):
    """Cubemap whose pixels are all distinct, for checking rotations."""
    faces = {}
    for i, face in enumerate(Face):
        pixels = np.zeros((size, size, 4), dtype=np.uint8)
        pixels[:, :, 0] = np.arange(size * size).reshape(size, size)
        pixels[:, :, 1] = i
        pixels[:, :, 3] = 255
        faces[face] = FaceImage(face, pixels)
    return CubemapResult(faces)


def write_hdr(path, rgb):
    """Save a float RGB array as a Radiance .hdr file."""
    bgr = cv2.cvtColor(np.asarray(rgb, dtype=np.float32), cv2.COLOR_RGB2BGR)
    assert cv2.imwrite(str(path), bgr)
    return str(path)
