"""Public API for Mandelbrot raster rendering."""

from .colors import Color, colorize, interpolate_colors, palette_color
from .config import ColorMode, ConfigError, RenderConfig, legacy_escape_bound
from .escape import PixelSample, evaluate, sample_pixel, smooth
from .renderer import pack_row, render, render_row, render_rows, render_to_sink
from .sink import ImageSink, MemorySink, PngFileSink, SinkError
from .viewport import map_pixel_to_complex

__all__ = [
    "Color",
    "ColorMode",
    "ConfigError",
    "ImageSink",
    "MemorySink",
    "PixelSample",
    "PngFileSink",
    "RenderConfig",
    "SinkError",
    "colorize",
    "evaluate",
    "interpolate_colors",
    "legacy_escape_bound",
    "map_pixel_to_complex",
    "pack_row",
    "palette_color",
    "render",
    "render_row",
    "render_rows",
    "render_to_sink",
    "sample_pixel",
    "smooth",
]
