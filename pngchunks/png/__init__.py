'''
# Portable Network Graphics

Format created to replace patent-emcumbered GIF files.

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html> and
is available a full test-suite with a lot of PNG images covering all
the possible cases at <http://www.schaik.com/pngsuite/>.

Here the file is seen only as a container: after the signature there is a sequence
of chunks, each one with its length, a type, a payload and a CRC. The payloads
are never interpreted, so any chunk type (also private ones) can be carried around.
'''
import logging
from enum import IntEnum

from bitstring import Bits

from pngchunks.core import Chunk
from pngchunks import fields
from pngchunks.meta import Endianess
from pngchunks.properties import Dependency
from pngchunks.streams import Stream
from pngchunks.common.crc import CRCField
from pngchunks.exceptions import (
    ChunkUnpackException,
    MagicException,
    InvalidSignature,
    MalformedChunk,
    InvalidChunkType,
    ChunkNotFound,
    InvalidEncoding,
)


logger = logging.getLogger(__name__)


PNG_SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'
# the length is a 4-byte unsigned integer but only values up to 2^31 - 1 are allowed
PNG_CHUNK_MAX_LENGTH = 2 ** 31 - 1


class ChunkTypeBit(IntEnum):
    '''Each byte of the type has a property encoded in bit 5 (the one that
    changes the case of an ASCII letter); the value is the index of the byte.'''
    ANCILLARY    = 0
    PRIVATE      = 1
    RESERVED     = 2
    SAFE_TO_COPY = 3


class ChunkType(object):
    '''The four bytes identifying the kind of a chunk.

    Only ASCII letters are allowed, anything else raises InvalidChunkType. The
    properties are read from the bits of the code itself:

     - ancillary bit: 0 (uppercase) means critical, 1 (lowercase) means ancillary
     - private bit: 0 (uppercase) means public, 1 (lowercase) means private
     - reserved bit: must be 0 (uppercase) in this version of PNG
     - safe-to-copy bit: 0 (uppercase) means unsafe to copy, 1 (lowercase) safe to copy

    A type with the reserved bit set can be built but is not valid.
    '''

    def __init__(self, value):
        if isinstance(value, ChunkType):
            value = value.bytes
        elif isinstance(value, str):
            try:
                value = value.encode('ascii')
            except UnicodeEncodeError as e:
                raise InvalidChunkType(message=f'chunk type {value!r} must be made of ASCII letters') from e

        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise InvalidChunkType(message=f'chunk type can\'t be built from {value.__class__.__name__}')

        value = bytes(value)

        if len(value) != 4:
            raise InvalidChunkType(message=f'chunk type {value!r} must be 4 bytes long')

        if not value.isalpha():
            raise InvalidChunkType(message=f'chunk type {value!r} must be made of ASCII letters')

        self._bytes = value

    @property
    def bytes(self):
        return self._bytes

    def __repr__(self):
        return f'<{self.__class__.__name__}({self})>'

    def __str__(self):
        return self._bytes.decode('ascii')

    def __eq__(self, other):
        if not isinstance(other, ChunkType):
            return NotImplemented

        return self._bytes == other._bytes

    def __hash__(self):
        return hash(self._bytes)

    def get_bit(self, bit: ChunkTypeBit) -> bool:
        # bitstring indexes from the most significant bit, so bit 5 is the third one
        return Bits(self._bytes)[bit * 8 + 2]

    def is_critical(self):
        return not self.get_bit(ChunkTypeBit.ANCILLARY)

    def is_public(self):
        return not self.get_bit(ChunkTypeBit.PRIVATE)

    def is_reserved_bit_valid(self):
        return not self.get_bit(ChunkTypeBit.RESERVED)

    def is_safe_to_copy(self):
        return self.get_bit(ChunkTypeBit.SAFE_TO_COPY)

    def is_valid(self):
        return self._bytes.isalpha() and self.is_reserved_bit_valid()


class PNGHeader(Chunk):
    magic = fields.StringField(8, default=PNG_SIGNATURE, is_magic=True)

    def unpack(self, stream):
        try:
            super().unpack(stream)
        except (MagicException, ChunkUnpackException) as e:
            raise InvalidSignature(message='the data doesn\'t start with the PNG signature') from e


class PNGChunk(Chunk):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each field is intended big-endian.

    The length counts only the bytes of the data and it's tied to it, the crc field
    is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    # Critical chunks

     1. IHDR: contains image's width, height, bit depth, color type, compression method, filter method and interlace method
     2. PLTE: contains the palette data
     3. IDAT: contains the actual image data (compressed)
     4. IEND: is the terminator chunk

    Once built or unpacked a chunk is frozen: to change it, build a new one.
    '''
    length = fields.StructField('I', endianess=Endianess.BIG_ENDIAN, maximum=PNG_CHUNK_MAX_LENGTH)
    type   = fields.StringField(4)
    data   = fields.StringField(Dependency('.length'))
    crc    = CRCField(['type', 'data'], endianess=Endianess.BIG_ENDIAN)  # network byte order

    @classmethod
    def build(cls, chunk_type, data):
        '''Create a chunk from its type and its payload, computing the CRC.'''
        chunk_type = ChunkType(chunk_type)
        try:
            data = bytes(memoryview(data))
        except TypeError as e:
            raise TypeError(f'chunk data must be bytes-like, not {data.__class__.__name__}') from e

        if len(data) > PNG_CHUNK_MAX_LENGTH:
            raise ValueError(f'data is {len(data)} bytes long, the maximum is {PNG_CHUNK_MAX_LENGTH}')

        chunk = cls()
        chunk.type.value = chunk_type.bytes
        chunk.data.value = data
        chunk.crc.update()
        chunk.freeze()

        return chunk

    @classmethod
    def from_bytes(cls, data, offset=0):
        '''Unpack a chunk starting at "offset", returns the chunk and the offset
        just after it, so that the parsing can continue from there.'''
        stream = Stream(data).seek(offset)
        chunk = cls(stream)

        return chunk, stream.tell()

    def unpack(self, stream):
        offset = stream.tell()
        try:
            super().unpack(stream)
        except ChunkUnpackException as e:
            raise MalformedChunk(chain=e.chain, message=f'chunk at offset {offset}: {e.message}') from e

        if not self.type.value.isalpha():
            raise MalformedChunk(chain=['type'],
                                 message=f'chunk at offset {offset}: type {self.type.value!r} is not made of letters')

        if not self.crc.is_valid():
            raise MalformedChunk(chain=['crc'], message='chunk at offset %d: CRC is 0x%08x but the data has 0x%08x' % (
                offset, self.crc.value, self.crc.calculate()))

        self.freeze()

    @property
    def chunk_type(self) -> ChunkType:
        return ChunkType(self.type.value)

    @property
    def payload(self) -> bytes:
        return self.data.value

    @property
    def checksum(self) -> int:
        return self.crc.value

    def data_as_string(self) -> str:
        try:
            return self.data.value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise InvalidEncoding(message=f'data of chunk {self.type.value!r} is not valid text: {e}') from e

    def __str__(self):
        try:
            data = self.data_as_string()
        except InvalidEncoding:
            data = repr(self.data.value)

        return 'Chunk Type = %s. Data = %s. Length = %d. CRC = %d' % (
            self.type.value.decode('latin1'),
            data,
            self.length.value,
            self.crc.value,
        )

    def isCritical(self):
        return self.chunk_type.is_critical()


class PNGFile(Chunk):
    '''The signature followed by all the chunks until the end of the data.

    No order is imposed to the chunks (not even IHDR first and IEND last), and
    more chunks can have the same type.'''
    header = PNGHeader()
    chunks = fields.ArrayField(PNGChunk())

    def _find_index(self, chunk_type):
        chunk_type = ChunkType(chunk_type)

        for idx, chunk in enumerate(self.chunks):
            if chunk.type.value == chunk_type.bytes:
                return idx

        return None

    def find(self, chunk_type):
        '''Return the first chunk with the given type or None.'''
        idx = self._find_index(chunk_type)

        return self.chunks[idx] if idx is not None else None

    def find_all(self, chunk_type):
        chunk_type = ChunkType(chunk_type)

        return [_ for _ in self.chunks if _.type.value == chunk_type.bytes]

    def insert(self, index, chunk):
        if not isinstance(chunk, PNGChunk):
            raise TypeError(f'only PNGChunk can be inserted, not {chunk.__class__.__name__}')

        if not chunk.is_frozen():
            raise ValueError('only built or unpacked chunks can be inserted, use PNGChunk.build()')

        if not chunk.type.value.isalpha():
            raise MalformedChunk(chain=['type'], message=f'type {chunk.type.value!r} is not made of letters')

        if not chunk.crc.is_valid():
            raise MalformedChunk(chain=['crc'], message='CRC is 0x%08x but the data has 0x%08x' % (
                chunk.crc.value, chunk.crc.calculate()))

        logger.debug('inserting chunk %s at position %d' % (chunk.type.value, index))
        self.chunks.insert(index, chunk)

    def append(self, chunk):
        self.insert(len(self.chunks), chunk)

    def remove(self, chunk_type):
        '''Remove the first chunk with the given type and return it.'''
        idx = self._find_index(chunk_type)

        if idx is None:
            raise ChunkNotFound(message=f'no chunk with type {ChunkType(chunk_type)} found')

        logger.debug('removing chunk %s at position %d' % (ChunkType(chunk_type), idx))

        return self.chunks.pop(idx)

    def types(self):
        '''Return an iterator over the types of the chunks as they are now.'''
        return (_.chunk_type for _ in self.chunks)
