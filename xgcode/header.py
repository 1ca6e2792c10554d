'''
# XGCode header

Fixed layout header prepended to the files that FlashForge (".gx") and Dremel
(".g3drem") printers accept; the on-device display reads the print metadata
from here. It's followed by a BMP thumbnail (80x60, 24 bits) and by the g-code.

All the integers are little endian. The "xgcode 1.0" layout is

    offset  size  field
    0x00    0x10  magic "xgcode 1.0\\n" padded with NULs
    0x10    0x04  thumbnail offset (it's the size of the header: 0x3a)
    0x14    0x04  g-code offset
    0x18    0x04  g-code offset, a second time
    0x1c    0x04  print time [s]
    0x20    0x04  filament usage, extruder 0 (right) [mm]
    0x24    0x04  filament usage, extruder 1 (left) [mm]
    0x28    0x02  multi-extruder type
    0x2a    0x02  layer height [um]
    0x2c    0x02  unknown
    0x2e    0x02  perimeter shells
    0x30    0x02  print speed [mm/s]
    0x32    0x02  hotbed temperature [C]
    0x34    0x02  extruder 0 temperature [C]
    0x36    0x02  extruder 1 temperature [C]
    0x38    0x02  unknown

The Dremel "g3drem 1.0" layout has the same geometry, with some of the words
named differently and the last one split into two material types.

Each layout is its own class; the magic works as version tag and it's used to
select the class when decoding.
'''
import logging
from enum import Enum, auto
from types import MappingProxyType

from .core import Chunk
from .enum import Compliant
from . import fields
from .exceptions import (
    XGCodeException,
    MalformedHeader,
    RangeError,
)


logger = logging.getLogger(__name__)

MAGIC_SIZE = 0x10


class HeaderVersion(Enum):
    XGCODE_1_0 = 1
    G3DREM_1_0 = 2


class ThumbnailLayout(Enum):
    '''How the position of the thumbnail is declared.'''
    EXPLICIT    = auto()  # offset and g-code offset are fields of the header
    BITMAP_SIZE = auto()  # right after the header, size taken from the BMP file header


class Header(Chunk):
    '''Base class for the header layouts.

    By default the thumbnail starts right after the header and its size is not
    stored: the layouts with explicit offsets override the methods below.'''
    version = None
    MAGIC = None
    thumbnail_layout = ThumbnailLayout.BITMAP_SIZE
    layout_fields = ()

    def get_thumbnail_offset(self):
        return self.size

    def get_thumbnail_length(self):
        return None

    def set_thumbnail_size(self, size):
        pass

    def validate(self):
        pass


class ExplicitLayoutHeader(Header):
    '''Layouts storing the thumbnail offset and the (twice repeated) g-code offset.'''
    thumbnail_layout = ThumbnailLayout.EXPLICIT
    layout_fields = ('thumbnail_offset', 'gcode_offset', 'gcode_offset_2')

    def get_thumbnail_offset(self):
        return self.thumbnail_offset.value

    def get_thumbnail_length(self):
        return self.gcode_offset.value - self.thumbnail_offset.value

    def set_thumbnail_size(self, size):
        offset = self.size
        gcode_offset = offset + size

        _, high = self.gcode_offset.get_bounds()
        if gcode_offset > high:
            raise RangeError(chain=['gcode_offset'], message=f'thumbnail too large ({size} bytes)')

        self.thumbnail_offset.value = offset
        self.gcode_offset.value = gcode_offset
        self.gcode_offset_2.value = gcode_offset

    def validate(self):
        size = self.size
        thumbnail_offset = self.thumbnail_offset.value
        gcode_offset = self.gcode_offset.value

        if thumbnail_offset != size:
            raise MalformedHeader(
                chain=['thumbnail_offset'],
                message=f'the thumbnail must start at 0x{size:x}, found 0x{thumbnail_offset:x}')

        if gcode_offset < thumbnail_offset:
            raise MalformedHeader(
                chain=['gcode_offset'],
                message=f'g-code offset 0x{gcode_offset:x} falls before the thumbnail')

        if gcode_offset != self.gcode_offset_2.value:
            raise MalformedHeader(
                chain=['gcode_offset_2'],
                message=f'second g-code offset 0x{self.gcode_offset_2.value:x} differs from 0x{gcode_offset:x}')


class XGCodeHeader(ExplicitLayoutHeader):
    version = HeaderVersion.XGCODE_1_0
    MAGIC = b'xgcode 1.0\n\x00\x00\x00\x00\x00'

    magic               = fields.StringField(MAGIC_SIZE, default=MAGIC, is_magic=True)
    thumbnail_offset    = fields.StructField('I', default=0x3a)
    gcode_offset        = fields.StructField('I', default=0x3a)
    gcode_offset_2      = fields.StructField('I', default=0x3a)  # yes, it's there twice
    print_time          = fields.StructField('I')
    filament_0_usage    = fields.StructField('I')
    filament_1_usage    = fields.StructField('I')
    multi_extruder_type = fields.StructField('H')
    layer_height        = fields.StructField('H')
    reserved0           = fields.StructField('H')
    perimeter_shells    = fields.StructField('H')
    print_speed         = fields.StructField('H')
    hotbed_temp         = fields.StructField('H')
    extruder_0_temp     = fields.StructField('H')
    extruder_1_temp     = fields.StructField('H')
    reserved1           = fields.StructField('H')


class G3DremHeader(ExplicitLayoutHeader):
    '''Dremel 3D20/3D40 flavour.'''
    version = HeaderVersion.G3DREM_1_0
    MAGIC = b'g3drem 1.0      '

    magic               = fields.StringField(MAGIC_SIZE, default=MAGIC, is_magic=True)
    thumbnail_offset    = fields.StructField('I', default=0x3a)
    gcode_offset        = fields.StructField('I', default=0x3a)
    gcode_offset_2      = fields.StructField('I', default=0x3a)
    print_time          = fields.StructField('I')
    filament_0_usage    = fields.StructField('I')
    filament_1_usage    = fields.StructField('I')
    information_flags   = fields.StructField('H')
    layer_height        = fields.StructField('H')
    infill_percentage   = fields.StructField('H')
    perimeter_shells    = fields.StructField('H')
    print_speed         = fields.StructField('H')
    hotbed_temp         = fields.StructField('H')
    extruder_0_temp     = fields.StructField('H')
    extruder_1_temp     = fields.StructField('H')
    right_material_type = fields.StructField('B')
    left_material_type  = fields.StructField('B')


VERSION2HEADER = MappingProxyType({
    HeaderVersion.XGCODE_1_0: XGCodeHeader,
    HeaderVersion.G3DREM_1_0: G3DremHeader,
})

MIN_HEADER_SIZE = min(_.calcsize() for _ in VERSION2HEADER.values())


def get_header_class(version):
    '''Accepts a HeaderVersion or its integer value.'''
    try:
        version = HeaderVersion(version)
    except ValueError:
        raise MalformedHeader(message=f'unknown header version {version!r}') from None

    return VERSION2HEADER[version]


def get_header_class_from_magic(data):
    for header_cls in VERSION2HEADER.values():
        if bytes(data[:MAGIC_SIZE]) == header_cls.MAGIC:
            return header_cls

    raise MalformedHeader(chain=['magic'], message=f'unknown signature {bytes(data[:MAGIC_SIZE])!r}')


def new_header(version=HeaderVersion.XGCODE_1_0, **values):
    '''Canonical header for the given version, with some of the fields set.

    The layout fields describe an empty thumbnail.'''
    header = get_header_class(version)()

    for name, value in values.items():
        header.set_field(name, value)

    return header


def decode_header(data) -> Header:
    '''Decode the header at the start of "data" (that can be the whole container).'''
    if len(data) < MIN_HEADER_SIZE:
        raise MalformedHeader(message=f'{len(data)} bytes are less than the minimum header size ({MIN_HEADER_SIZE})')

    header_cls = get_header_class_from_magic(data)

    size = header_cls.calcsize()
    if len(data) < size:
        raise MalformedHeader(message=f'{len(data)} bytes are less than the {header_cls.__name__} size ({size})')

    logger.debug('decoding %s (version %s)' % (header_cls.__name__, header_cls.version))

    try:
        return header_cls(bytes(data[:size]), compliant=Compliant.MAGIC)
    except MalformedHeader:
        raise
    except XGCodeException as e:
        raise MalformedHeader(chain=e.chain, message=e.message) from e


def encode_header(header) -> bytes:
    '''Pack the header, refusing the ones that decode_header() would reject:
    a different signature or layout fields not describing a valid layout.'''
    if header.MAGIC is not None and header.magic.value != header.MAGIC:
        raise MalformedHeader(chain=['magic'], message=f'unknown signature {header.magic.value!r}')

    header.validate()

    return header.pack()
