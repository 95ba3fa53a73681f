class PNGChunksException(Exception):
    '''Base class to extend in order to throw exception in pngchunks.

    It takes as argument the chain of the fields that caused the exception,
    innermost first, so that the string representation can show the path
    from the outermost record (like "chunks.2.crc").
    '''

    def __init__(self, chain=None, message=None):
        self.chain = chain if chain is not None else []
        self.message = message
        super().__init__(message)

    @property
    def path(self):
        return '.'.join(reversed(self.chain))

    def __str__(self):
        if not self.chain:
            return self.message or ''

        if not self.message:
            return f'at {self.path}'

        return f'{self.message} (at {self.path})'


class UnpackException(PNGChunksException):
    pass


class MagicException(PNGChunksException):
    pass


class ChunkUnpackException(PNGChunksException):
    pass


class InvalidSignature(MagicException):
    '''The buffer doesn't start with the PNG signature.'''
    pass


class MalformedChunk(ChunkUnpackException):
    '''Length, type or CRC of a chunk can't be trusted: since the boundaries of the
    following chunks can't be trusted either, the whole parsing fails.'''
    pass


class InvalidChunkType(PNGChunksException, ValueError):
    pass


class ChunkNotFound(PNGChunksException, LookupError):
    pass


class InvalidEncoding(PNGChunksException, ValueError):
    pass
