"""Modules registered with the core."""

from .canvas import CanvasModule
from .pixel import Pixel, PixelError, PixelOutOfBounds

__all__ = ["CanvasModule", "Pixel", "PixelError", "PixelOutOfBounds"]
