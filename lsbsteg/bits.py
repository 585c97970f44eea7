"""Bit access, payload preparation and path helpers."""

from __future__ import annotations

import numpy as np


def get_bit(secret: bytes, n: int) -> bool:
    """Return bit ``n`` of ``secret``, counting from the least significant bit of byte 0."""
    if n < 0 or n >= len(secret) * 8:
        raise IndexError("bit index out of range")
    byte_position, bit_position = divmod(n, 8)
    return bool((secret[byte_position] >> bit_position) & 1)


def is_image_grayscale(image: np.ndarray) -> bool:
    """True for a three-channel image whose channels are identical everywhere."""
    pixels = np.asarray(image)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        return False
    return bool(
        np.array_equal(pixels[..., 0], pixels[..., 1])
        and np.array_equal(pixels[..., 1], pixels[..., 2])
    )


def generate_image_secret(image: np.ndarray) -> bytes:
    """Turn an image into payload bytes, one per pixel if grey, else one per channel."""
    pixels = np.asarray(image, dtype=np.uint8)
    if is_image_grayscale(pixels):
        return pixels[..., 0].tobytes()
    return pixels.tobytes()


def _last_separator(path: str) -> int:
    return max(path.rfind("/"), path.rfind("\\"))


def extract_file_name(path: str) -> str:
    """Return the part of ``path`` after its last slash or backslash."""
    return path[_last_separator(path) + 1:]


def file_name_without_extension(filename: str) -> str:
    """Strip everything from the last dot on; names without a dot are unchanged."""
    dot = filename.rfind(".")
    return filename if dot < 0 else filename[:dot]


def parent_directory(path: str) -> str:
    """Return ``path`` up to and including its last separator, or "" if there is none."""
    return path[:_last_separator(path) + 1]