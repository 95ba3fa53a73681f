import io
import logging
import os
import struct
import zlib

import pytest


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)


def raw_chunk(chunk_type: bytes, data: bytes, crc=None) -> bytes:
    '''Encode a chunk by hand, optionally with a wrong CRC.'''
    if crc is None:
        crc = zlib.crc32(chunk_type + data)

    return struct.pack('>I', len(data)) + chunk_type + data + struct.pack('>I', crc)


@pytest.fixture
def png_signature():
    return b'\x89PNG\r\n\x1a\n'


@pytest.fixture
def ihdr_data():
    # 1x1, 8 bits grayscale, deflate, adaptive filter, no interlace
    return struct.pack('>IIBBBBB', 1, 1, 8, 0, 0, 0, 0)


@pytest.fixture
def idat_data():
    # one scanline: filter type 0 and one black pixel
    return zlib.compress(b'\x00\x00')


@pytest.fixture
def minimal_png(png_signature, ihdr_data, idat_data):
    return (
        png_signature +
        raw_chunk(b'IHDR', ihdr_data) +
        raw_chunk(b'IDAT', idat_data) +
        raw_chunk(b'IEND', b'')
    )


@pytest.fixture
def pillow_png():
    from PIL import Image

    buffer = io.BytesIO()
    Image.new('RGB', (5, 5), 'red').save(buffer, format='PNG')

    return buffer.getvalue()


@pytest.fixture
def test_root_dir():
    from pathlib import Path

    return Path(__file__).parent


@pytest.fixture
def make_raw_chunk():
    return raw_chunk
