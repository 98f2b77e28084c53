"""Batch sharpening of numerically-named raster images."""

__version__ = "1.0.0"
