"""
codec.py — Read panoramas and write cube faces.

Decoding goes through Pillow, except Radiance .hdr files (RGBE), which
Pillow cannot open and which are read with OpenCV.  Decoded images are
plain arrays:

    (H, W, 3|4) uint8     for 8-bit sources
    (H, W, 3)   uint16    for 16-bit grayscale sources
    (H, W, 3)   float32   for HDR / float / 32-bit integer sources

Faces are encoded with Pillow at its default quality.  JPEG carries no
alpha, so faces are reduced to RGB for it; PNG and WebP keep RGBA.
"""

import io
import os
from concurrent.futures import ThreadPoolExecutor
from enum import Enum

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .cubemap import CubemapResult, FaceImage
from .errors import InputDecodeError, InputOpenError, OutputDirError, OutputEncodeError

# Disable PIL's decompression bomb guard so large panoramas can be opened
Image.MAX_IMAGE_PIXELS = None

RADIANCE_MAGIC = (b'#?RADIANCE', b'#?RGBE')


class OutputFormat(str, Enum):
    JPG = 'jpg'
    PNG = 'png'
    WEBP = 'webp'

    def __str__(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        return {'jpg': 'JPEG', 'png': 'PNG', 'webp': 'WEBP'}[self.value]

    @property
    def has_alpha(self) -> bool:
        return self is not OutputFormat.JPG


# ── Decoding ──────────────────────────────────────────────────────────────────

def _read_bytes(path: str) -> bytes:
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as exc:
        raise InputOpenError(f"cannot open {path}: {exc.strerror or exc}") from exc


def read_radiance_hdr(data: bytes) -> np.ndarray:
    """
    Decode a Radiance RGBE image with OpenCV.

    Returns:
        (H, W, 3) float32 array of linear radiance
    """
    buf = np.frombuffer(data, dtype=np.uint8)
    try:
        img = cv2.imdecode(buf, cv2.IMREAD_ANYDEPTH | cv2.IMREAD_ANYCOLOR)
    except cv2.error as exc:
        raise InputDecodeError(f"cannot decode Radiance HDR data: {exc}") from exc
    if img is None or img.ndim != 3:
        raise InputDecodeError("cannot decode Radiance HDR data")
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB).astype(np.float32)


def _from_pil(img: Image.Image) -> np.ndarray:
    if img.mode in ('F', 'I'):
        # 32-bit float / int grayscale keeps its values as float (HDR), replicated to RGB
        values = np.asarray(img, dtype=np.float32)
        return np.repeat(values[:, :, np.newaxis], 3, axis=2)
    if img.mode.startswith('I;16'):
        # 16-bit grayscale stays integer so tone mapping leaves it alone
        values = np.asarray(img.convert('I')).astype(np.uint16)
        return np.repeat(values[:, :, np.newaxis], 3, axis=2)

    has_alpha = img.mode in ('RGBA', 'LA', 'PA') or (
        img.mode == 'P' and 'transparency' in img.info)
    return np.array(img.convert('RGBA' if has_alpha else 'RGB'))


def decode_image(path: str) -> np.ndarray:
    """
    Decode an equirectangular image file into a pixel array.

    Raises:
        InputOpenError:   path missing or unreadable
        InputDecodeError: bytes are not a supported image
    """
    if not os.path.isfile(path):
        raise InputOpenError(f"file not found: {path}")
    data = _read_bytes(path)

    if data.startswith(RADIANCE_MAGIC):
        return read_radiance_hdr(data)

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return _from_pil(img)
    except UnidentifiedImageError as exc:
        raise InputDecodeError(f"not a recognised image: {path}") from exc
    except (OSError, SyntaxError, ValueError) as exc:
        raise InputDecodeError(f"cannot decode {path}: {exc}") from exc


# ── Encoding ──────────────────────────────────────────────────────────────────

def face_filename(face_img: FaceImage, fmt: OutputFormat) -> str:
    return f"{face_img.face}.{OutputFormat(fmt).extension}"


def encode_face(face_img: FaceImage, path: str, fmt: OutputFormat) -> None:
    """Write one face; JPEG drops the alpha channel."""
    fmt = OutputFormat(fmt)
    if fmt.has_alpha:
        img = Image.fromarray(face_img.pixels)
    else:
        img = Image.fromarray(np.ascontiguousarray(face_img.pixels[:, :, :3]))
    try:
        img.save(path, format=fmt.pil_format)
    except (OSError, ValueError, KeyError) as exc:
        raise OutputEncodeError(f"cannot write {path}: {exc}") from exc


def make_output_dir(out_dir: str) -> None:
    try:
        os.makedirs(out_dir, exist_ok=True)
    except OSError as exc:
        raise OutputDirError(f"cannot create output directory {out_dir}: "
                             f"{exc.strerror or exc}") from exc


def save_cubemap(result: CubemapResult, out_dir: str,
                 fmt: OutputFormat = OutputFormat.PNG) -> list[str]:
    """
    Write all six faces as <face>.<ext> into *out_dir* (created if absent).

    Faces are encoded concurrently; the first failure is raised once every
    write has finished.

    Returns:
        the written paths, in face order
    """
    make_output_dir(out_dir)
    paths = [os.path.join(out_dir, face_filename(face_img, fmt)) for face_img in result]

    with ThreadPoolExecutor(max_workers=len(paths)) as pool:
        futures = [pool.submit(encode_face, face_img, path, fmt)
                   for face_img, path in zip(result, paths)]
    for fut in futures:
        fut.result()
    return paths
