import PIL.Image
import pytest

import render


def _run(tmp_path, *args, name='out.png'):
    output = tmp_path / name
    code = render.main([*args, '--output', str(output)])
    return code, output


def test_renders_png(tmp_path):
    code, output = _run(tmp_path, '--resolution', '8x6', '--iterations', '20', '--location', '1.5x1')
    assert code == 0
    with PIL.Image.open(output) as image:
        assert image.size == (8, 6)
        assert image.mode == 'RGB'


def test_size_multiplier(tmp_path):
    code, output = _run(tmp_path, '--resolution', '4x2', '--size', '2', '--iterations', '5')
    assert code == 0
    with PIL.Image.open(output) as image:
        assert image.size == (8, 4)


def test_modes_produce_different_images(tmp_path):
    args = ['--resolution', '6x4', '--iterations', '30', '--location', '2x1', '--zoom', '3']
    _, smooth = _run(tmp_path, *args, '--mode', 'smooth', name='smooth.png')
    _, banded = _run(tmp_path, *args, '--mode', 'banded', name='banded.png')
    with PIL.Image.open(smooth) as a, PIL.Image.open(banded) as b:
        assert a.tobytes() != b.tobytes()


@pytest.mark.parametrize(
    'args',
    [
        ['--mode', 'plasma'],
        ['--resolution', 'axb'],
        ['--resolution', '0x10'],
        ['--resolution', '10'],
        ['--location', '1x'],
        ['--iterations', '0'],
        ['--iterations', 'many'],
        ['--zoom', 'wide'],
        ['--escape-bound', '1.0'],
        ['--size', '0'],
        ['--escape-bound', '8', '--legacy-bound'],
        ['--gpu'],
    ],
)
def test_configuration_errors_exit_before_rendering(tmp_path, capsys, args):
    with pytest.raises(SystemExit) as excinfo:
        _run(tmp_path, '--resolution', '2x2', *args)
    assert excinfo.value.code == 2
    assert 'error' in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []


def test_unwritable_output_exits_nonzero(tmp_path, capsys):
    blocker = tmp_path / 'file'
    blocker.write_text('x')
    code = render.main(['--resolution', '2x2', '--iterations', '5', '--output', str(blocker / 'out.png')])
    assert code == 1
    assert 'error: could not open file' in capsys.readouterr().err


@pytest.mark.parametrize(
    'value, expected',
    [
        ('1920x1080', (1920, 1080)),
        ('640X480', (640, 480)),
        ('3×2', (3, 2)),
    ],
)
def test_parse_resolution(value, expected):
    assert render.parse_resolution(value) == expected


@pytest.mark.parametrize(
    'value, expected',
    [
        ('0x0', (0.0, 0.0)),
        ('-0.5x0.25', (-0.5, 0.25)),
        ('1.5x-2', (1.5, -2.0)),
        ('1e-3x2', (0.001, 2.0)),
        ('.5×.5', (0.5, 0.5)),
    ],
)
def test_parse_location(value, expected):
    assert render.parse_location(value) == expected


def test_overflowing_location_still_renders(tmp_path):
    code, output = _run(tmp_path, '--resolution', '2x1', '--iterations', '10', '--location', '-1e200x0')
    assert code == 0
    with PIL.Image.open(output) as image:
        assert image.getpixel((0, 0)) == (0, 0, 0)
