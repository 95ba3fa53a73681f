'''
We are implementing fields to handle CRC calculation.
'''
from zlib import crc32 as _crc32

from .. import fields


def crc32(*chunks: bytes) -> int:
    '''CRC-32 of the concatenation of the arguments.'''
    value = 0
    for data in chunks:
        value = _crc32(data, value)

    return value


class CRCField(fields.StructField):
    """standard CRC methods with pre and post conditioning, as defined by ISO 3309 [ISO-3309]
    or ITU-T V.42 [ITU-V42]. The CRC polynomial employed is

      x^32+x^26+x^23+x^22+x^16+x^12+x^11+x^10+x^8+x^7+x^5+x^4+x^2+x+1

    The 32-bit CRC register is initialized to all 1's, and then the data from each byte is processed
    from the least significant bit (1) to the most significant bit (128). After all the data bytes are processed,
    the CRC register is inverted (its ones complement is taken). This value is transmitted (stored in the file)
    MSB first.

    See <https://www.w3.org/TR/PNG-Structure.html#CRC-algorithm>.

    The value is stored: when unpacking is the one found in the data, so that
    is_valid() can tell if the data is corrupted; update() sets it from
    the fields it covers.
    """

    def __init__(self, fields, *args, **kwargs):
        super().__init__('I', *args, **kwargs)
        self.fields = fields

    def calculate(self):
        return crc32(*(getattr(self.father, field_name).raw for field_name in self.fields))

    def update(self):
        self.value = self.calculate()

    def is_valid(self):
        return self.value == self.calculate()
