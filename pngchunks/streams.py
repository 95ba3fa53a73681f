import io
import logging

from .exceptions import UnpackException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/file objects to
    uniform their properties: the parsing needs exact reads and
    to know how much data is left.

    All the data is loaded in memory, we don't keep around file handles.'''

    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_fileobj)

        init_method()

    def __repr__(self):
        return '<%s(%s, offset=%d, size=%d)>' % (
            self.__class__.__name__,
            self._type.__name__,
            self.tell(),
            len(self),
        )

    def __len__(self):
        with self.obj.getbuffer() as view:
            return view.nbytes

    def init_str(self):
        '''We think this is a path'''
        logger.debug('reading path \'%s\'' % self.obj)
        with open(self.obj, 'rb') as f:
            self.obj = io.BytesIO(f.read())

    def init_PosixPath(self):
        self.init_str()

    def init_WindowsPath(self):
        self.init_str()

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def init_memoryview(self):
        self.obj = io.BytesIO(self.obj.tobytes())

    def init_fileobj(self):
        '''Anything else must be a binary file-like object'''
        if not hasattr(self.obj, 'read'):
            raise ValueError('\'%s\' is the wrong kind of object to use as stream' % self._type.__name__)

        self.obj = io.BytesIO(self.obj.read())

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

        return self

    def tell(self):
        return self.obj.tell()

    def remaining(self):
        return len(self) - self.tell()

    def at_eof(self):
        return self.remaining() <= 0

    def read_exact(self, size):
        '''Read exactly "size" bytes or fail without moving from the actual offset.'''
        if size > self.remaining():
            raise UnpackException(message='needed %d bytes at offset %d but only %d are available' % (
                size, self.tell(), self.remaining()))

        return self.obj.read(size)

    def write(self, data):
        return self.obj.write(data)
