"""Colour transforms, colour correction, k-means quantisation and background subtraction on NumPy images, with command-line viewers."""

__version__ = "0.1.0"