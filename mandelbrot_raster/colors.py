"""Mapping of escape values to RGB colors."""

from __future__ import annotations

import math
from typing import NamedTuple

from .config import ColorMode
from .escape import PixelSample


class Color(NamedTuple):
    r: int
    g: int
    b: int


BLACK = Color(0, 0, 0)


def _wrap(value: int) -> int:
    # Keep the low 8 bits, two's-complement style, so -1 wraps to 255.
    return value & 0xFF


def _round_half_away(value: float) -> int:
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def palette_color(n: int) -> Color:
    """Deterministic palette entry for integer ``n``."""

    return Color(_wrap(n * 8), _wrap(n * 9), _wrap(0xFF - n * 4))


def interpolate_colors(color1: Color, color2: Color, fraction: float) -> Color:
    """Channel-wise linear interpolation, rounded and wrapped to 8 bits."""

    return Color(*(
        _wrap(_round_half_away(c1 + (c2 - c1) * fraction))
        for c1, c2 in zip(color1, color2)
    ))


def colorize_smooth(sample: PixelSample) -> Color:
    escape = sample.escape_value
    # Orbits that overflow to inf or nan are colored like points inside the set.
    if escape == 0.0 or not math.isfinite(escape):
        return BLACK
    base = math.floor(escape)
    fraction = escape - base
    return interpolate_colors(palette_color(base), palette_color(base + 1), fraction)


def colorize_banded(sample: PixelSample) -> Color:
    scaled = sample.escape_value * sample.final_real
    if not math.isfinite(scaled * 4.0):
        return BLACK
    return Color(
        _wrap(math.floor(scaled)),
        _wrap(math.floor(scaled * 2.0)),
        _wrap(math.floor(scaled * 4.0)),
    )


_COLORIZERS = {
    ColorMode.SMOOTH: colorize_smooth,
    ColorMode.BANDED: colorize_banded,
}


def colorize(sample: PixelSample, mode: ColorMode) -> Color:
    """Color ``sample`` using the strategy selected by ``mode``."""

    return _COLORIZERS[mode](sample)
