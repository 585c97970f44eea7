"""Least-significant-bit image steganography: headers, embedding, image helpers and a command line."""

__version__ = "0.1.0"
__all__ = ["__version__"]