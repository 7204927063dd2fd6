"""Pixel processing for raw camera frames: debayering, corrections, kernels, resizing, QOI."""

__version__ = "0.1.0"

__all__ = [
    "correction",
    "debayer",
    "formats",
    "kernel",
    "qoi",
    "resize",
]