"""
Core module for the abstraction of a file format
"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import (
    ChunkUnpackException,
    UnpackException,
)
from .properties import (
    get_root_from_chunk,
    Dependency,
)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk can contain sub-chunks, declared as class attributes in order:

        class Simple(Chunk):
            length = fields.StructField('I')
            data   = fields.StringField(Dependency('.length'))

    Passing some data (bytes, a file object or a path) to the constructor
    unpacks it right away.
    """

    def __init__(self, source=None, **kwargs):
        super().__init__(**kwargs)

        if source is not None:
            stream = source if isinstance(source, Stream) else Stream(source)
            self.logger.debug('unpacking \'%s\' from %r' % (self.__class__.__name__, stream))
            self.unpack(stream)
        else:
            self.relayout()

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def get_dependencies(self) -> Dict[str, Dependency]:
        dep = super().get_dependencies()

        for field_name, field in self.get_fields():
            for key, value in field.get_dependencies().items():
                dep.update({f'{field_name}.{key}': value})

        return dep

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    @property
    def root(self):
        '''Obtain the final father of this chunk'''
        return get_root_from_chunk(self)

    @property
    def isRoot(self):
        return self.root is self

    def _get_value(self):
        return self

    def _set_value(self, value):
        raise AttributeError(f'a {self.__class__.__name__} can be set only field by field')

    def _get_size(self):
        '''the size MUST be derived from the subchunks'''
        return sum(field.size for _, field in self.get_fields())

    def _get_raw(self):
        return b''.join(field.raw for _, field in self.get_fields())

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''This method triggers the chunk's children to reset the offsets
        and returns the size of the chunk.'''
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            size += field_instance.relayout(offset=offset + size)

        return size

    def pack(self, stream=None, relayout=True):
        '''Encode the chunk into its binary representation: the fields are written
        at their offset into the stream (a new one if not passed) and the bytes
        of the chunk, as read back from the stream, are returned.'''
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream
        start = stream.tell()
        base = start - self.offset

        for field_name, field_instance in self.get_fields():
            self.logger.debug('packing %s.%s at offset %08x' % (
                self.__class__.__name__, field_name, field_instance.offset))

            stream.seek(base + field_instance.offset)
            field_instance.pack(stream=stream, relayout=False)

        return stream.seek(start).read_exact(self.size)

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take binary
        data and transform it into the representation given by the class this method
        is implemented in.

        The fields are unpacked in order of declaration; the first failing one stops
        the process raising ChunkUnpackException with the chain of fields' names
        that locates the failure.
        '''
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, stream.tell()))

            try:
                field.unpack(stream)
            except ChunkUnpackException as e:
                e.chain.append(field_name)
                raise
            except UnpackException as e:
                raise ChunkUnpackException(chain=[field_name], message=e.message) from e

