"""Image processing routines for grayscale images held as NumPy arrays."""

__version__ = "0.1.0"