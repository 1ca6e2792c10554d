"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct
from enum import Enum

from .enum import Compliant
from .meta import FieldBase, Endianess
from .streams import Stream
from .exceptions import UnpackException, MagicException, RangeError


logger = logging.getLogger(__name__)

# struct's format characters that pack integers, with standard sizes
INTEGER_FORMATS = 'bBhHiIlLqQ'


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, compliant=Compliant.INHERIT, is_magic=False):
        super().__init__()
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.compliant = compliant
        self.is_magic = is_magic

        self.init()

    def init(self):
        self._value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def is_compliant(self, level):
        '''Returns True if this field or its ancestors (via Compliant.INHERIT)
        require the given level of compliance'''
        instance = self
        while instance is not None:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_value(self):
        return self._value

    def _set_value(self, value):
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
        '''Write the raw representation at the offset of the field, returns the
        content of the whole stream.'''
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        stream.seek(self.offset if self.offset is not None else 0)
        stream.write(self.raw)

        return stream.getvalue()

    def unpack(self, stream):
        self.raw = stream.read_exact(self.size)

    def _check_assignable(self, value):
        '''The magic is part of the format: it can be read whatever it is, but
        only its own value can be assigned.'''
        if self.is_magic and value != self.value_from_default():
            raise RangeError(chain=[self.name or ''], message=f'the magic can\'t be changed to {value!r}')

    def _check_magic(self, value):
        if not self.is_magic or value == self.value_from_default():
            return

        logger.warning(f'the magic for field \'{self.name}\' doesn\'t correspond: {value!r}')
        if self.is_compliant(Compliant.MAGIC):
            raise MagicException(chain=[], message=f'unexpected magic {value!r}')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.

    The integer formats enforce the width of the field: assigning a value that
    doesn't fit raises RangeError.

    It's possible to indicate via the "enum" argument some subclass of enum.Enum so to
    have directly a representation of the integer value of the field itself; raw values
    without a member are kept as plain integers.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def __repr__(self):
        if isinstance(self.value, Enum):
            return f'<{self.__class__.__name__}({self.value!r})>'

        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def __str__(self):
        width = self.size * 2  # we want to be as large as possible
        return '0x%0*x' % (width, self._to_int(self.value))

    def value_from_default(self):
        if not self.enum:
            return super().value_from_default()

        return self._from_int(self._to_int(self.default))

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def get_bounds(self):
        '''Returns the minimum and maximum integer the field can hold.'''
        bits = 8 * struct.calcsize(self.get_format())

        if self.format.islower():
            return -(1 << (bits - 1)), (1 << (bits - 1)) - 1

        return 0, (1 << bits) - 1

    def _to_int(self, value):
        return value.value if isinstance(value, Enum) else value

    def _from_int(self, value):
        if not self.enum:
            return value

        try:
            return self.enum(value)
        except ValueError:
            if self.is_compliant(Compliant.ENUM):
                raise UnpackException(chain=[], message=f'{self.enum.__name__} has no element with value 0x{value:x}')

            logger.warning(f'enum {self.enum.__name__} doesn\'t have element with value 0x{value:x} in it')

        return value

    def _set_value(self, value) -> None:
        if self.format in INTEGER_FORMATS:
            number = self._to_int(value)
            if isinstance(number, bool) or not isinstance(number, int):
                raise RangeError(chain=[self.name or ''], message=f'expected an integer, got {value!r}')

            low, high = self.get_bounds()
            if not low <= number <= high:
                raise RangeError(chain=[self.name or ''], message=f'{value!r} is outside [{low}, {high}]')

            value = self._from_int(number)

        self._check_assignable(value)
        self._value = value

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self._to_int(self.value))

    def _set_raw(self, raw: bytes) -> None:
        try:
            value = struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            logger.error(e)
            exc = MagicException if self.is_magic and self.is_compliant(Compliant.MAGIC) else UnpackException
            raise exc(chain=[], message=str(e))

        value = self._from_int(value)
        self._check_magic(value)

        self._value = value


class StringField(Field):
    """Represent a contiguous chunk of bytes with fixed length."""

    def __init__(self, n=None, **kw):
        if n is None and not kw.get('default'):
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.length = n or len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if not self.default else bytes(self.default)

    def _get_size(self):
        return self.length

    def _set_value(self, value) -> None:
        value = self._check_length(value)
        self._check_assignable(value)

        self._value = value

    def _check_length(self, value) -> bytes:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise RangeError(chain=[self.name or ''], message=f'expected bytes, got {value.__class__.__name__}')

        value = bytes(value)
        if len(value) != self.length:
            raise RangeError(
                chain=[self.name or ''],
                message=f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        return value

    def _get_raw(self):
        return self.value

    def _set_raw(self, raw) -> None:
        raw = self._check_length(raw)
        self._check_magic(raw)

        self._value = raw
