"""Render configuration for Mandelbrot raster images."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_RESOLUTION = (1920, 1080)
DEFAULT_ESCAPE_BOUND = 4.0


class ConfigError(ValueError):
    """Raised when a render configuration is invalid."""


class ColorMode(Enum):
    """Pixel coloring strategy."""

    SMOOTH = "smooth"
    BANDED = "banded"

    @classmethod
    def parse(cls, name: str) -> "ColorMode":
        key = str(name).strip().lower()
        mode = _MODE_ALIASES.get(key)
        if mode is None:
            choices = ", ".join(sorted(_MODE_ALIASES))
            raise ConfigError(f"Unknown color mode '{name}'. Valid choices: {choices}.")
        return mode


_MODE_ALIASES = {
    "smooth": ColorMode.SMOOTH,
    "default": ColorMode.SMOOTH,
    "banded": ColorMode.BANDED,
    "checkerboard": ColorMode.BANDED,
}

# Squared escape radius each mode implied when the mode tag doubled as the bound.
_LEGACY_BOUNDS = {
    ColorMode.SMOOTH: float(1 << 16),
    ColorMode.BANDED: 4.0,
}


def legacy_escape_bound(mode: ColorMode) -> float:
    """Return the escape bound historically coupled to ``mode``."""

    return _LEGACY_BOUNDS[mode]


@dataclass(frozen=True)
class RenderConfig:
    """Fully resolved parameters for a single render."""

    width: int
    height: int
    viewport_height: float
    offset_x: float
    offset_y: float
    max_iterations: int
    mode: ColorMode = ColorMode.SMOOTH
    escape_bound: float = DEFAULT_ESCAPE_BOUND

    def __post_init__(self) -> None:
        for name in ("width", "height", "max_iterations"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}.")
            if value < 1:
                raise ConfigError(f"{name} must be at least 1, got {value}.")

        for name in ("viewport_height", "offset_x", "offset_y", "escape_bound"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}.")
            if not math.isfinite(value):
                raise ConfigError(f"{name} must be finite, got {value}.")

        if self.viewport_height <= 0:
            raise ConfigError(f"viewport_height must be positive, got {self.viewport_height}.")
        if not isinstance(self.mode, ColorMode):
            raise ConfigError(f"mode must be a ColorMode, got {self.mode!r}.")
        # log(log|z|) in the smoothing step is only defined once |z|^2 > 1.
        if self.escape_bound <= 1:
            raise ConfigError(
                f"escape_bound must be greater than 1 for smooth escape values, got {self.escape_bound}."
            )

    @property
    def viewport_width(self) -> float:
        return self.viewport_height * (self.width / self.height)

    @classmethod
    def build(
        cls,
        *,
        resolution: tuple[int, int] = DEFAULT_RESOLUTION,
        location: tuple[float, float] = (0.0, 0.0),
        zoom: float = 2.0,
        iterations: int = 256,
        mode: ColorMode | str = ColorMode.SMOOTH,
        escape_bound: Optional[float] = None,
        legacy_bound: bool = False,
        size: float = 1.0,
    ) -> "RenderConfig":
        """Resolve user-facing options into a validated :class:`RenderConfig`.

        ``size`` scales the resolution. When ``legacy_bound`` is set the escape
        bound is taken from the color mode instead of ``escape_bound``.
        """

        if not isinstance(mode, ColorMode):
            mode = ColorMode.parse(mode)

        if not size > 0 or not math.isfinite(size):
            raise ConfigError(f"size must be a positive number, got {size}.")
        width = int(round(resolution[0] * size))
        height = int(round(resolution[1] * size))
        if resolution[0] < 1 or resolution[1] < 1 or width < 1 or height < 1:
            raise ConfigError(
                f"resolution must be positive, got {resolution[0]}x{resolution[1]} at size {size}."
            )

        if legacy_bound:
            if escape_bound is not None:
                raise ConfigError("escape_bound cannot be combined with legacy_bound.")
            bound = legacy_escape_bound(mode)
        else:
            bound = DEFAULT_ESCAPE_BOUND if escape_bound is None else float(escape_bound)

        return cls(
            width=width,
            height=height,
            viewport_height=float(zoom),
            offset_x=float(location[0]),
            offset_y=float(location[1]),
            max_iterations=iterations,
            mode=mode,
            escape_bound=bound,
        )
