import pytest

from mandelbrot_raster import ColorMode, RenderConfig


@pytest.fixture
def small_config():
    """2x2 frame whose bottom-right pixel samples c = 0."""

    return RenderConfig(
        width=2,
        height=2,
        viewport_height=2.0,
        offset_x=1.0,
        offset_y=1.0,
        max_iterations=50,
        mode=ColorMode.SMOOTH,
        escape_bound=4.0,
    )
