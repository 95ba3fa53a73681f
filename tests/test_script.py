import runpy

import pytest

from pngchunks.png import PNGFile


@pytest.fixture
def pnghide(test_root_dir):
    return runpy.run_path(str(test_root_dir / '..' / 'scripts' / 'pnghide.py'))['main']


@pytest.fixture
def png_path(tmp_path, minimal_png):
    path = tmp_path / 'image.png'
    path.write_bytes(minimal_png)

    return path


def test_encode_decode_remove(pnghide, png_path, minimal_png, capsys):
    assert pnghide(['pnghide.py', 'encode', str(png_path), 'ruSt', 'hello']) == 0

    png = PNGFile(png_path.read_bytes())
    assert [str(_) for _ in png.types()] == ['IHDR', 'IDAT', 'ruSt', 'IEND']

    assert pnghide(['pnghide.py', 'decode', str(png_path), 'ruSt']) == 0
    assert capsys.readouterr().out == 'hello\n'

    assert pnghide(['pnghide.py', 'remove', str(png_path), 'ruSt']) == 0
    assert png_path.read_bytes() == minimal_png


def test_encode_to_output(pnghide, png_path, minimal_png, tmp_path):
    output = tmp_path / 'output.png'

    assert pnghide(['pnghide.py', 'encode', str(png_path), 'ruSt', 'hello', str(output)]) == 0

    assert png_path.read_bytes() == minimal_png
    assert PNGFile(output.read_bytes()).find('ruSt').payload == b'hello'


def test_print(pnghide, png_path, capsys):
    assert pnghide(['pnghide.py', 'print', str(png_path)]) == 0

    lines = capsys.readouterr().out.splitlines()

    assert len(lines) == 3
    assert lines[2] == '[02] Chunk Type = IEND. Data = . Length = 0. CRC = 2923585666'


def test_errors(pnghide, png_path, tmp_path):
    assert pnghide(['pnghide.py']) == 1
    assert pnghide(['pnghide.py', 'unknown', str(png_path)]) == 1
    assert pnghide(['pnghide.py', 'decode', str(png_path)]) == 1

    assert pnghide(['pnghide.py', 'decode', str(png_path), 'ruSt']) == 2
    assert pnghide(['pnghide.py', 'remove', str(png_path), 'Ru1t']) == 2

    not_png = tmp_path / 'not.png'
    not_png.write_bytes(b'GIF89a')

    assert pnghide(['pnghide.py', 'print', str(not_png)]) == 2
