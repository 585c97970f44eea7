"""Image file access and simple pixel operations."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError


def iter_files(folder, ext=None) -> Iterator[Path]:
    """Yield the files in ``folder`` matching ``*.ext`` (any extension if ``ext`` is None)."""
    directory = Path(folder)
    if not directory.is_dir():
        return
    pattern = f"*.{ext or '*'}"
    for path in sorted(directory.glob(pattern)):
        if path.is_file():
            yield path.absolute()


def resize_image(image, max_size, interpolate=True) -> np.ndarray:
    """Scale ``image`` so that its longer side equals ``max_size``."""
    pixels = np.asarray(image, dtype=np.uint8)
    if max_size <= 0:
        raise ValueError("max_size must be positive")
    height, width = pixels.shape[:2]
    if height == 0 or width == 0:
        raise ValueError("cannot resize an empty image")
    ratio = (width if width > height else height) / max_size
    new_width = int(width / ratio)
    new_height = int(height / ratio)
    if new_width < 1 or new_height < 1:
        raise ValueError("resized image would be empty")
    resample = Image.Resampling.BILINEAR if interpolate else Image.Resampling.NEAREST
    resized = Image.fromarray(pixels).resize((new_width, new_height), resample)
    return np.asarray(resized, dtype=np.uint8)


def negative_image(image) -> np.ndarray:
    """Return the photographic negative of an 8-bit image."""
    return 255 - np.asarray(image, dtype=np.uint8)


def color_to_gray(image) -> np.ndarray:
    """Average the three channels of each pixel into a single grey level."""
    pixels = np.asarray(image, dtype=np.uint8)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError("expected a three-channel image")
    return (pixels.astype(np.uint16).sum(axis=2) // 3).astype(np.uint8)


def load_image(path, grayscale=False) -> np.ndarray:
    """Read an image file as an 8-bit array, single-channel or RGB."""
    try:
        with Image.open(path) as img:
            converted = img.convert("L" if grayscale else "RGB")
    except UnidentifiedImageError as exc:
        raise ValueError(f"cannot read image: {path}") from exc
    return np.array(converted, dtype=np.uint8)


def save_image(path, image) -> None:
    """Write an 8-bit array to ``path``; the format follows the extension."""
    Image.fromarray(np.asarray(image, dtype=np.uint8)).save(path)