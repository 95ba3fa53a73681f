"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct
from typing import Dict

from .meta import FieldBase, Endianess
from .properties import Dependency, PropertyDescriptor
from .exceptions import (
    UnpackException,
    MagicException,
    ChunkUnpackException,
)


logger = logging.getLogger(__name__)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, is_magic=False):
        super().__init__()
        self._frozen = False
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.is_magic = is_magic

        self.init()

    def init(self):
        self._value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented

        return self.__class__ is other.__class__ and self.raw == other.raw

    __hash__ = None

    def get_dependencies(self) -> Dict[str, Dependency]:
        """Return the dictionary containing as key the name of the attribute
        and as value the Dependency it's bound to."""
        instance_dict = self.__dict__
        return {_k: _v for _k, _v in instance_dict.items() if isinstance(_v, Dependency)}

    def is_frozen(self):
        '''A field is frozen if it or one of its fathers is.'''
        instance = self
        while instance is not None:
            if instance._frozen:
                return True

            instance = instance.father

        return False

    def freeze(self):
        self._frozen = True

    def _check_frozen(self):
        if self.is_frozen():
            raise AttributeError(f'field \'{self.name}\' of {self.__class__.__name__} is frozen')

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        self._check_frozen()
        self._value = value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    def _set_raw(self, value) -> None:
        raise NotImplementedError(f"method {self.__class__.__name__}._set_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
        fset=lambda self, value: self._set_raw(value),
    )

    def relayout(self, offset=0):
        self.offset = offset

        return self.size

    def pack(self, stream=None, relayout=True):
        '''Write the binary representation into the stream (if any) and return it.'''
        if relayout:
            self.relayout()

        raw = self.raw
        if stream is not None:
            stream.write(raw)

        return raw

    def unpack(self, stream):
        self.offset = stream.tell()
        self._unpack_stream(stream)

    def _unpack_stream(self, stream):
        raise NotImplementedError(f"method {self.__class__.__name__}._unpack_stream() not implemented")


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.

    Via "maximum" is possible to indicate an upper bound that the unpacked values must respect.
    """

    def __init__(self, format, default=0, maximum=None, **kw):
        self.format = format
        self.maximum = maximum
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def __str__(self):
        width = self.size * 2
        formatter = '0x%%0%dx' % width
        return formatter % self.value

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value)

    def _set_raw(self, raw: bytes) -> None:
        self.value = self._unpack(raw)

    def _unpack_struct(self, raw: bytes) -> int:
        try:
            unpacked_value = struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            logger.error(e)
            raise UnpackException(message=str(e)) from e

        return unpacked_value

    def _unpack(self, raw):
        value = self._unpack_struct(raw)

        if self.maximum is not None and value > self.maximum:
            raise UnpackException(message=f'value 0x{value:x} exceeds the maximum 0x{self.maximum:x}')

        return value

    def _unpack_stream(self, stream):
        self.value = self._unpack(stream.read_exact(self.size))


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be fixed or a Dependency from another field, in the latter
    case setting a value of different length updates the other field."""

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def value_from_default(self):
        if self.default:
            return self.default

        if 'length' in self.get_dependencies():
            return b''

        return b'\x00' * self.length

    def _get_size(self):
        return len(self.value)

    def _set_value(self, value) -> None:
        """The StringField has the size as a parameter and we must follow that indication
        unless it's a Dependency, in that case we are going to write back the value where necessary."""
        self._check_frozen()

        try:
            value = bytes(memoryview(value))
        except TypeError as e:
            raise TypeError(f'{self.__class__.__name__} accepts only bytes-like values, not {value.__class__.__name__}') from e

        length = len(value)
        if 'length' not in self.get_dependencies() and length != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        self._value = value

        if 'length' in self.get_dependencies() and self.father is not None:
            self.length = length

    def _get_raw(self):
        return self.value

    def _set_raw(self, raw: bytes) -> None:
        self.value = raw

    def _unpack_stream(self, stream):
        raw = stream.read_exact(self.length)

        if self.is_magic and raw != self.default:
            logger.warning('the magic doesn\'t correspond')
            raise MagicException(message=f'expected {self.default!r}, found {raw!r}')

        self._set_value(raw)


class ArrayField(Field):
    '''Un/Pack an array of Chunks.

    The elements are unpacked until the stream is exhausted, each one
    as a copy of the field passed as argument.

    This class behaves like a list in python for reading (its value is a tuple),
    the modifications pass from append(), insert() and pop().
    '''

    def __init__(self, field_cls, **kw):
        self.field_cls = field_cls

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        return []

    def _get_value(self):
        return tuple(self._value)

    def _set_value(self, value):
        self._check_frozen()
        elements = list(value)
        for element in elements:
            element.father = self

        self._value = elements

    def _get_raw(self):
        return b''.join(element.raw for element in self._value)

    def _get_size(self):
        return sum(element.size for element in self._value)

    def relayout(self, offset=0):
        super().relayout(offset=offset)
        size = 0
        for element in self._value:
            size += element.relayout(offset=offset + size)

        return size

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def _unpack_stream(self, stream):
        self._check_frozen()
        elements = []

        while not stream.at_eof():
            element = self.instance_element()
            try:
                element.unpack(stream)
            except ChunkUnpackException as e:
                e.chain.append(str(len(elements)))
                raise

            logger.debug('unpacked element #%d at offset %d' % (len(elements), element.offset))
            elements.append(element)

        self._value = elements

    def insert(self, index, element):
        self._check_frozen()
        element.father = self
        self._value.insert(index, element)

    def append(self, element):
        self.insert(len(self._value), element)

    def pop(self, index=-1):
        self._check_frozen()
        element = self._value.pop(index)
        element.father = None

        return element
