'''
Functions to use the PNG as a container from the outside: each one
takes a PNGFile and gives back a new one, the original is never modified.
'''
import copy
import logging

from pngchunks.png import PNGFile, PNGChunk
from pngchunks.png.utils import insert_before_terminal


logger = logging.getLogger(__name__)


def parse(data) -> PNGFile:
    return PNGFile(data)


def serialize(png: PNGFile) -> bytes:
    return png.pack()


def append(png: PNGFile, chunk_type, payload, before=b'IEND') -> PNGFile:
    '''Add a new chunk just before the first one of type "before" if present,
    at the end otherwise (or always, when "before" is None).'''
    result = copy.deepcopy(png)
    chunk = PNGChunk.build(chunk_type, payload)

    if before is None:
        result.append(chunk)
    else:
        insert_before_terminal(result, chunk, terminal=before)

    return result


def find(png: PNGFile, chunk_type):
    return png.find(chunk_type)


def remove(png: PNGFile, chunk_type):
    '''Returns the new PNGFile and the payload of the removed chunk.'''
    result = copy.deepcopy(png)
    chunk = result.remove(chunk_type)

    logger.debug(f'removed chunk {chunk.chunk_type} with {len(chunk.payload)} bytes of data')

    return result, chunk.payload


def list_types(png: PNGFile):
    return png.types()
