import pytest

from xgcode.enum import Compliant
from xgcode.exceptions import MalformedHeader, MagicException, RangeError
from xgcode.header import (
    HeaderVersion,
    ThumbnailLayout,
    XGCodeHeader,
    G3DremHeader,
    VERSION2HEADER,
    MIN_HEADER_SIZE,
    new_header,
    decode_header,
    encode_header,
    get_header_class,
)


def test_layout():
    """The offsets must be the ones the firmware expects."""
    header = XGCodeHeader()

    assert header.size == 0x3a
    assert MIN_HEADER_SIZE == 0x3a
    assert header.layout['magic'] == (0x00, 0x10)
    assert header.layout['thumbnail_offset'] == (0x10, 4)
    assert header.layout['gcode_offset_2'] == (0x18, 4)
    assert header.layout['print_time'] == (0x1c, 4)
    assert header.layout['multi_extruder_type'] == (0x28, 2)
    assert header.layout['hotbed_temp'] == (0x32, 2)
    assert header.layout['reserved1'] == (0x38, 2)

    dremel = G3DremHeader()
    assert dremel.size == 0x3a
    assert dremel.layout['right_material_type'] == (0x38, 1)
    assert dremel.layout['left_material_type'] == (0x39, 1)


def test_defaults():
    header = new_header()

    assert isinstance(header, XGCodeHeader)
    assert header.version == HeaderVersion.XGCODE_1_0
    assert header.thumbnail_layout == ThumbnailLayout.EXPLICIT

    raw = encode_header(header)

    assert len(raw) == 0x3a
    assert raw[:0x10] == b'xgcode 1.0\n\x00\x00\x00\x00\x00'
    assert raw[0x10:0x1c] == b'\x3a\x00\x00\x00' * 3
    assert raw[0x1c:] == b'\x00' * (0x3a - 0x1c)


def test_decode_third_party_layout(build_gx, thumbnail, gcode):
    header = decode_header(build_gx(thumbnail, gcode))

    assert isinstance(header, XGCodeHeader)
    assert header.thumbnail_offset.value == 0x3a
    assert header.gcode_offset.value == 0x3a + len(thumbnail)
    assert header.gcode_offset_2.value == header.gcode_offset.value
    assert header.print_time.value == 1234
    assert header.filament_0_usage.value == 5678
    assert header.filament_1_usage.value == 0
    assert header.layer_height.value == 200
    assert header.reserved0.value == 0x1234
    assert header.perimeter_shells.value == 2
    assert header.print_speed.value == 60
    assert header.hotbed_temp.value == 50
    assert header.extruder_0_temp.value == 210
    assert header.extruder_1_temp.value == 0
    assert header.reserved1.value == 1


def test_reserved_fields_preserved(build_gx, minimal_bitmap):
    data = build_gx(minimal_bitmap, b'', reserved0=0x7eef, reserved1=0x55aa)

    header = decode_header(data)

    assert encode_header(header) == data[:0x3a]


def test_roundtrip():
    header = new_header(
        print_time=3600,
        filament_0_usage=1500,
        layer_height=180,
        hotbed_temp=65535,
        extruder_0_temp=220,
        reserved0=0xbeef,
    )

    decoded = decode_header(encode_header(header))

    assert decoded == header
    assert decoded.get_values() == header.get_values()


def test_roundtrip_g3drem():
    header = new_header(
        HeaderVersion.G3DREM_1_0,
        print_time=60,
        infill_percentage=20,
        perimeter_shells=3,
        right_material_type=1,
        left_material_type=0xff,
    )

    raw = encode_header(header)
    assert raw[:0x10] == b'g3drem 1.0      '

    decoded = decode_header(raw)

    assert isinstance(decoded, G3DremHeader)
    assert decoded == header
    assert decoded.left_material_type.value == 0xff


def test_range_enforcement():
    header = new_header()

    header.hotbed_temp = 65535
    assert header.hotbed_temp.value == 65535

    with pytest.raises(RangeError):
        header.hotbed_temp = 70000

    with pytest.raises(RangeError):
        header.set_field('print_time', 1 << 32)

    with pytest.raises(RangeError):
        new_header(layer_height=-1)


def test_thumbnail_size():
    header = new_header()

    header.set_thumbnail_size(54)

    assert header.get_thumbnail_offset() == 0x3a
    assert header.get_thumbnail_length() == 54
    assert header.gcode_offset.value == header.gcode_offset_2.value == 0x3a + 54

    with pytest.raises(RangeError):
        header.set_thumbnail_size(0xffffffff)


def test_unknown_version():
    with pytest.raises(MalformedHeader):
        new_header(version=3)

    assert get_header_class(1) is XGCodeHeader
    assert get_header_class(HeaderVersion.G3DREM_1_0) is G3DremHeader


def test_version_table_is_read_only():
    with pytest.raises(TypeError):
        VERSION2HEADER[HeaderVersion.XGCODE_1_0] = G3DremHeader


def test_decode_short(gx_bytes):
    with pytest.raises(MalformedHeader):
        decode_header(gx_bytes[:0x39])

    with pytest.raises(MalformedHeader):
        decode_header(b'')


def test_decode_bad_magic(gx_bytes):
    with pytest.raises(MalformedHeader) as excinfo:
        decode_header(b'ygcode' + gx_bytes[6:])

    assert excinfo.value.chain == ['magic']


def test_decode_bad_thumbnail_offset(gx_bytes):
    data = gx_bytes[:0x10] + b'\x40\x00\x00\x00' + gx_bytes[0x14:]

    with pytest.raises(MalformedHeader) as excinfo:
        decode_header(data)

    assert excinfo.value.chain == ['thumbnail_offset']


def test_decode_gcode_offset_inside_header(build_gx):
    data = build_gx(b'', b'')
    data = data[:0x14] + b'\x10\x00\x00\x00' * 2 + data[0x1c:]

    with pytest.raises(MalformedHeader) as excinfo:
        decode_header(data)

    assert excinfo.value.chain == ['gcode_offset']


def test_decode_gcode_offsets_differ(gx_bytes):
    data = gx_bytes[:0x18] + b'\x00\x01\x00\x00' + gx_bytes[0x1c:]

    with pytest.raises(MalformedHeader) as excinfo:
        decode_header(data)

    assert excinfo.value.chain == ['gcode_offset_2']


def test_header_classes_are_strict_only_when_decoding():
    """Instantiating directly doesn't enforce the magic, decode_header() does."""
    data = b'x' * 0x10 + encode_header(new_header())[0x10:]

    header = XGCodeHeader(data)
    assert header.magic.value == b'x' * 0x10

    with pytest.raises(MagicException):
        XGCodeHeader(data, compliant=Compliant.MAGIC)


def test_magic_cannot_be_assigned():
    header = new_header()

    with pytest.raises(RangeError) as excinfo:
        header.set_field('magic', b'x' * 0x10)

    assert excinfo.value.chain == ['magic']
    assert header.magic.value == XGCodeHeader.MAGIC

    with pytest.raises(RangeError):
        new_header(magic=b'x' * 0x10)

    # assigning its own value is fine
    header.magic = XGCodeHeader.MAGIC


@pytest.mark.parametrize('values,chain', [
    ({'thumbnail_offset': 0}, ['thumbnail_offset']),
    ({'gcode_offset': 0x100}, ['gcode_offset_2']),
    ({'gcode_offset_2': 0x40}, ['gcode_offset_2']),
    ({'gcode_offset': 0x10, 'gcode_offset_2': 0x10}, ['gcode_offset']),
])
def test_encode_rejects_inconsistent_layout(values, chain):
    header = new_header(**values)

    with pytest.raises(MalformedHeader) as excinfo:
        encode_header(header)

    assert excinfo.value.chain == chain


def test_encode_rejects_foreign_magic():
    """A header unpacked without compliance keeps whatever magic it had, but
    it can't be written back."""
    header = XGCodeHeader(b'x' * 0x10 + encode_header(new_header())[0x10:])

    with pytest.raises(MalformedHeader) as excinfo:
        encode_header(header)

    assert excinfo.value.chain == ['magic']


def test_roundtrip_consistent_layout():
    header = new_header(gcode_offset=0x100, gcode_offset_2=0x100, print_time=1)

    decoded = decode_header(encode_header(header))

    assert decoded == header
    assert decoded.get_thumbnail_length() == 0x100 - 0x3a
