import pytest

from pngchunks.core import Chunk
from pngchunks.exceptions import UnpackException, MagicException
from pngchunks.fields import StructField, StringField, ArrayField
from pngchunks.meta import Endianess
from pngchunks.streams import Stream
from pngchunks.common.crc import CRCField, crc32


def test_structfield_conversion_raw_value():
    """Check that the attributes "value" and "raw" are the analogous
    of the integers and bytes representation for a field."""
    field = StructField('I')

    assert field.size == 4
    assert field.raw == b'\x00\x00\x00\x00'
    assert field.value == 0

    field.value = 0xcafe

    assert field.value == 0xcafe
    assert field.raw == b'\xfe\xca\x00\x00'


def test_structfield_big_endian():
    field = StructField('I', endianess=Endianess.BIG_ENDIAN)

    field.raw = b'\x01\x02\x03\x04'

    assert field.value == 0x01020304
    assert str(field) == '0x01020304'


def test_structfield_maximum():
    field = StructField('I', endianess=Endianess.BIG_ENDIAN, maximum=0x7fffffff)

    field.unpack(Stream(b'\x7f\xff\xff\xff'))
    assert field.value == 0x7fffffff

    with pytest.raises(UnpackException):
        field.unpack(Stream(b'\x80\x00\x00\x00'))


def test_structfield_short_stream():
    field = StructField('I')
    stream = Stream(b'\x01\x02')

    with pytest.raises(UnpackException):
        field.unpack(stream)

    # a failed read doesn't consume the stream
    assert stream.tell() == 0


def test_stringfield():
    field = StringField(0x10)

    assert field.size == 0x10
    assert field.raw == b'\x00' * field.size

    with pytest.raises(ValueError):
        field.value = b'kebab'

    data = bytes(range(0x10))

    field.value = data

    assert field.value == data
    assert field.raw == data


def test_stringfield_magic():
    field = StringField(4, default=b'MAGC', is_magic=True)

    field.unpack(Stream(b'MAGC'))
    assert field.value == b'MAGC'

    with pytest.raises(MagicException):
        field.unpack(Stream(b'MAGX'))


def test_arrayfield_until_eof():
    array = ArrayField(StructField('H', endianess=Endianess.BIG_ENDIAN))

    array.unpack(Stream(b'\x00\x01\x00\x02\x00\x03'))

    assert [_.value for _ in array] == [1, 2, 3]
    assert array.raw == b'\x00\x01\x00\x02\x00\x03'


def test_arrayfield_insert_pop():
    array = ArrayField(StructField('B'))
    for value in (1, 3):
        element = array.instance_element()
        element.value = value
        array.append(element)

    element = array.instance_element()
    element.value = 2
    array.insert(1, element)

    assert [_.value for _ in array] == [1, 2, 3]

    popped = array.pop(0)

    assert popped.value == 1
    assert popped.father is None
    assert [_.value for _ in array] == [2, 3]

    assert array.relayout(offset=0x10) == 2
    assert [_.offset for _ in array] == [0x10, 0x11]


def test_crc32():
    assert crc32(b'IEND') == 0xae426082
    assert crc32(b'IE', b'ND') == crc32(b'IEND')
    assert crc32() == 0


def test_crcfield():
    class Checked(Chunk):
        data = StringField(4)
        crc = CRCField(['data'], endianess=Endianess.BIG_ENDIAN)

    checked = Checked()
    checked.data.value = b'IEND'

    assert not checked.crc.is_valid()

    checked.crc.update()

    assert checked.crc.is_valid()
    assert checked.raw == b'IEND\xae\x42\x60\x82'
