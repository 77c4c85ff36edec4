"""Mapping from pixel coordinates to the complex plane."""

from __future__ import annotations

from .config import RenderConfig


def map_pixel_to_complex(px: float, py: float, config: RenderConfig) -> tuple[float, float]:
    """Return the complex coordinate ``(real, imag)`` sampled by pixel ``(px, py)``.

    Both axes are scaled by the viewport width over the pixel width, so pixels
    stay square in the complex plane whatever the aspect ratio.
    """

    real = px * config.viewport_width / config.width - config.offset_x
    imag = py * config.viewport_width / config.width - config.offset_y
    return real, imag
