"""Escape-time evaluation and smooth escape values."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .config import RenderConfig
from .viewport import map_pixel_to_complex

_LOG2 = math.log(2)


@dataclass(frozen=True)
class PixelSample:
    """Final iterate and smooth escape value for one pixel.

    ``escape_value`` is ``0.0`` for points that never escaped.
    """

    final_real: float
    final_imag: float
    escape_value: float


def evaluate(real: float, imag: float, max_iterations: int, escape_bound: float) -> tuple[float, float, float]:
    """Iterate ``z <- z**2 + c`` from ``z = 0`` for ``c = real + imag*i``.

    Stops once ``|z|**2`` exceeds ``escape_bound`` or after ``max_iterations``
    steps. Returns ``(iteration_count, z_real, z_imag)``; the count is a float
    so it can be refined by :func:`smooth`.
    """

    count = 0.0
    z_real = 0.0
    z_imag = 0.0
    while z_real * z_real + z_imag * z_imag <= escape_bound and count < max_iterations:
        next_real = z_real * z_real - z_imag * z_imag + real
        z_imag = 2.0 * z_real * z_imag + imag
        z_real = next_real
        count += 1.0
    return count, z_real, z_imag


def smooth(iteration_count: float, z_real: float, z_imag: float, max_iterations: int) -> float:
    """Convert an escape time into a continuous escape value.

    Returns ``0.0`` when the point did not escape. The caller must have used an
    escape bound greater than 1, otherwise the nested logarithm is undefined.
    """

    if iteration_count >= max_iterations:
        return 0.0
    log_zn = math.log(z_real * z_real + z_imag * z_imag) / 2
    nu = math.log(log_zn / _LOG2) / _LOG2
    return iteration_count + (1 - nu)


def sample_pixel(px: int, py: int, config: RenderConfig) -> PixelSample:
    real, imag = map_pixel_to_complex(px, py, config)
    count, z_real, z_imag = evaluate(real, imag, config.max_iterations, config.escape_bound)
    escape_value = smooth(count, z_real, z_imag, config.max_iterations)
    return PixelSample(final_real=z_real, final_imag=z_imag, escape_value=escape_value)
