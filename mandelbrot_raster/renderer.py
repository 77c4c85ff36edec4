"""Frame rendering for Mandelbrot raster images."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional, Sequence

from .colors import Color, colorize
from .config import RenderConfig
from .escape import sample_pixel
from .sink import ImageSink

logger = logging.getLogger(__name__)

Row = tuple[Color, ...]


def render_row(config: RenderConfig, y: int) -> Row:
    """Render pixel row ``y`` left to right."""

    return tuple(colorize(sample_pixel(x, y, config), config.mode) for x in range(config.width))


def render_rows(config: RenderConfig) -> Iterator[Row]:
    """Yield the rows of a frame top to bottom, computing each one on demand.

    Stopping iteration early abandons the rest of the render.
    """

    logger.debug(
        "Rendering %dx%d frame, %d iterations, mode=%s, escape bound %g",
        config.width,
        config.height,
        config.max_iterations,
        config.mode.value,
        config.escape_bound,
    )
    for y in range(config.height):
        yield render_row(config, y)


def render(config: RenderConfig) -> list[Row]:
    """Render a whole frame into memory."""

    return list(render_rows(config))


def pack_row(row: Sequence[Color]) -> bytes:
    """Pack a row of colors as RGB888 bytes without padding."""

    return bytes(channel for color in row for channel in color)


def render_to_sink(
    config: RenderConfig,
    sink: ImageSink,
    *,
    rows: Optional[Iterable[Sequence[Color]]] = None,
    progress: Optional[Callable[[int, int], None]] = None,
) -> None:
    """Stream a frame into ``sink`` one row at a time.

    ``rows`` overrides the row source, e.g. with an accelerated backend. Any
    failure aborts the sink and propagates to the caller.
    """

    if rows is None:
        rows = render_rows(config)

    sink.begin(config.width, config.height)
    try:
        for y, row in enumerate(rows):
            sink.write_row(pack_row(row))
            if progress is not None:
                progress(y, config.height)
        sink.end()
    except BaseException:
        sink.abort()
        raise
