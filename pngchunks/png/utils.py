'''
Policies that are up to the caller and not part of the format itself: where
to put a new chunk, how to look up chunks by name, if a file is still
readable by other decoders.
'''
import io
import logging

from pngchunks.png import ChunkType
from pngchunks.exceptions import ChunkNotFound


logger = logging.getLogger(__name__)


def terminal_index(chunks, terminal=b'IEND'):
    '''Return the position of the first terminal chunk or None.'''
    terminal = ChunkType(terminal)

    for idx, chunk in enumerate(chunks):
        if chunk.type.value == terminal.bytes:
            return idx

    return None


def insert_before_terminal(png, chunk, terminal=b'IEND'):
    '''Insert the chunk just before the terminal one, at the end if there is no
    terminal chunk. Returns the position of the chunk.'''
    idx = terminal_index(png.chunks, terminal=terminal)

    if idx is None:
        logger.debug(f'no {ChunkType(terminal)} chunk found, appending at the end')
        idx = len(png.chunks)

    png.insert(idx, chunk)

    return idx


def get_chunk_by_name(chunks, name):
    chunk_type = ChunkType(name)
    chunk = [_ for _ in chunks if _.type.value == chunk_type.bytes]

    if len(chunk) == 0:
        raise ChunkNotFound(message=f'no chunk with name {name}')

    return chunk[0]


def check_decodable(data):
    '''Ask Pillow to open the image and verify it: this walks all the chunks
    checking the CRCs like any other decoder would do.'''
    from PIL import Image

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
    except (OSError, SyntaxError) as e:
        logger.warning(f'the image is not decodable: {e}')
        return False

    return True
