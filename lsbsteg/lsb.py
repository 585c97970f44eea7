"""Least-significant-bit embedding of a secret into 8-bit images.

Secret bits are taken starting from the least significant bit of byte 0.
They are placed into the low ``bits_used_per_channel`` bits of successive
image values in row-major order. For colour images that means pixel by
pixel, channel by channel. A value that receives only part of its quota
has its remaining low bits cleared. A secret larger than the image
capacity is silently truncated.
"""

from __future__ import annotations

import numpy as np

from .secret import SecretHeader


def _bits_per_value(header: SecretHeader) -> int:
    bits = header.encoding_header.bits_used_per_channel
    if not 1 <= bits <= 8:
        raise ValueError(f"bits used per channel must be in [1, 8], got {bits}")
    return bits


def _secret_bits(secret: bytes, count: int) -> np.ndarray:
    data = np.frombuffer(bytes(secret), dtype=np.uint8)
    if count > data.size * 8:
        raise IndexError("bit index out of range: secret shorter than its declared size")
    return np.unpackbits(data, bitorder="little")[:count]


def _embed(values: np.ndarray, secret: bytes, size_bits: int, bits: int) -> np.ndarray:
    """Return a copy of the 1-D ``values`` with the secret bits written in."""
    result = values.copy()
    count = min(size_bits, result.size * bits)
    if count <= 0:
        return result
    payload = _secret_bits(secret, count)
    touched = -(-count // bits)
    padded = np.zeros(touched * bits, dtype=np.uint8)
    padded[:count] = payload
    weights = (1 << np.arange(bits)).astype(np.uint16)
    low = (padded.reshape(touched, bits).astype(np.uint16) * weights).sum(axis=1)
    keep_mask = np.uint8((0xFF << bits) & 0xFF)
    result[:touched] = (result[:touched] & keep_mask) | low.astype(np.uint8)
    return result


def _extract(values: np.ndarray, size_bits: int, bits: int) -> bytes:
    count = min(max(size_bits, 0), values.size * bits)
    if count == 0:
        return b""
    touched = -(-count // bits)
    shifts = np.arange(bits, dtype=np.uint8)
    extracted = ((values[:touched, None] >> shifts) & 1).astype(np.uint8)
    return np.packbits(extracted.reshape(-1)[:count], bitorder="little").tobytes()


def _gray_plane(pixels: np.ndarray) -> np.ndarray:
    """The values a grey-level pass walks: one per pixel position of each row."""
    if pixels.ndim == 2:
        return pixels
    if pixels.ndim == 3:
        height, width = pixels.shape[:2]
        return pixels.reshape(height, -1)[:, :width]
    raise ValueError("expected a two- or three-dimensional image")


def _color_pixels(image) -> np.ndarray:
    pixels = np.asarray(image, dtype=np.uint8)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError("expected a three-channel image")
    return pixels


def encode_grayscale_lsb(image, header: SecretHeader, secret: bytes) -> np.ndarray:
    """Hide ``secret`` in the grey levels of ``image``; the input is left untouched."""
    bits = _bits_per_value(header)
    result = np.array(image, dtype=np.uint8, copy=True)
    plane = _gray_plane(result)
    encoded = _embed(plane.reshape(-1), secret, header.secret_size_bits, bits)
    plane[...] = encoded.reshape(plane.shape)
    return result


def encode_color_lsb(image, header: SecretHeader, secret: bytes) -> np.ndarray:
    """Hide ``secret`` in the channels of a three-channel ``image``."""
    bits = _bits_per_value(header)
    pixels = _color_pixels(image)
    encoded = _embed(pixels.reshape(-1), secret, header.secret_size_bits, bits)
    return encoded.reshape(pixels.shape)


def decode_grayscale_lsb(image, header: SecretHeader) -> bytes:
    """Recover the secret bytes hidden by :func:`encode_grayscale_lsb`."""
    bits = _bits_per_value(header)
    plane = _gray_plane(np.asarray(image, dtype=np.uint8))
    return _extract(np.ascontiguousarray(plane).reshape(-1), header.secret_size_bits, bits)


def decode_color_lsb(image, header: SecretHeader) -> bytes:
    """Recover the secret bytes hidden by :func:`encode_color_lsb`."""
    bits = _bits_per_value(header)
    pixels = _color_pixels(image)
    return _extract(pixels.reshape(-1), header.secret_size_bits, bits)