import pytest

from mandelbrot_raster import (
    Color,
    ColorMode,
    PixelSample,
    RenderConfig,
    colorize,
    interpolate_colors,
    palette_color,
    render,
)
from mandelbrot_raster.colors import BLACK, colorize_banded, colorize_smooth


@pytest.mark.parametrize(
    'n, expected',
    [
        (0, (0, 0, 255)),
        (1, (8, 9, 251)),
        (3, (24, 27, 243)),
        (32, (0, 32, 127)),
        (64, (0, 64, 255)),
        (1000, (64, 40, 95)),
        (-1, (248, 247, 3)),
    ],
)
def test_palette_color(n, expected):
    assert palette_color(n) == expected


@pytest.mark.parametrize('n', [0, 1, 31, 63, 64, 255, 256, 1000, 123456789])
def test_palette_channels_stay_in_byte_range(n):
    assert all(0 <= channel <= 255 for channel in palette_color(n))


def test_interpolation_rounds_half_away_from_zero():
    assert interpolate_colors(Color(0, 0, 0), Color(1, 3, 5), 0.5) == (1, 2, 3)


def test_interpolation_endpoints():
    a, b = Color(10, 200, 30), Color(250, 0, 31)
    assert interpolate_colors(a, b, 0.0) == a
    assert interpolate_colors(a, b, 1.0) == b


@pytest.mark.parametrize('escape', [1.0, 5.0, 17.0, 300.0])
def test_smooth_whole_escape_value_is_palette_entry(escape):
    sample = PixelSample(final_real=3.0, final_imag=-2.0, escape_value=escape)
    assert colorize_smooth(sample) == palette_color(int(escape))


def test_smooth_inside_set_is_black():
    assert colorize_smooth(PixelSample(0.1, 0.2, 0.0)) == BLACK


def test_smooth_interpolates_between_palette_entries():
    sample = PixelSample(final_real=-1.0, final_imag=-3.0, escape_value=3.267978)
    assert colorize_smooth(sample) == (26, 29, 242)


def test_smooth_negative_escape_value():
    sample = PixelSample(final_real=40.0, final_imag=0.0, escape_value=-0.5)
    assert colorize_smooth(sample) == (124, 124, 129)


@pytest.mark.parametrize('escape', [float('-inf'), float('inf'), float('nan')])
def test_smooth_non_finite_escape_value_is_black(escape):
    assert colorize_smooth(PixelSample(final_real=1e200, final_imag=0.0, escape_value=escape)) == BLACK


@pytest.mark.parametrize(
    'final_real, escape',
    [
        (1e200, float('-inf')),
        (0.0, float('inf')),
        (float('nan'), 2.5),
        (1e308, 4.0),
    ],
)
def test_banded_non_finite_product_is_black(final_real, escape):
    assert colorize_banded(PixelSample(final_real=final_real, final_imag=0.0, escape_value=escape)) == BLACK


@pytest.mark.parametrize('mode', [ColorMode.SMOOTH, ColorMode.BANDED])
def test_overflowing_orbit_renders_black(mode):
    config = RenderConfig(
        width=1,
        height=1,
        viewport_height=2.0,
        offset_x=-1e200,
        offset_y=0.0,
        max_iterations=10,
        mode=mode,
    )
    assert render(config) == [(BLACK,)]


def test_banded_uses_final_real_coordinate():
    sample = PixelSample(final_real=-1.0, final_imag=-3.0, escape_value=3.267978)
    assert colorize_banded(sample) == (252, 249, 242)


def test_banded_wraps_instead_of_clamping():
    sample = PixelSample(final_real=100.0, final_imag=0.0, escape_value=3.0)
    # 300, 600, 1200 keep their low 8 bits
    assert colorize_banded(sample) == (44, 88, 176)


def test_banded_negative_values_wrap():
    sample = PixelSample(final_real=-1.0, final_imag=0.0, escape_value=1.5)
    assert colorize_banded(sample) == (254, 253, 250)


def test_banded_inside_set_is_black():
    assert colorize_banded(PixelSample(0.3, 0.1, 0.0)) == BLACK


def test_colorize_dispatches_on_mode():
    sample = PixelSample(final_real=-1.0, final_imag=-3.0, escape_value=3.267978)
    assert colorize(sample, ColorMode.SMOOTH) == colorize_smooth(sample)
    assert colorize(sample, ColorMode.BANDED) == colorize_banded(sample)
    assert colorize(sample, ColorMode.SMOOTH) != colorize(sample, ColorMode.BANDED)
