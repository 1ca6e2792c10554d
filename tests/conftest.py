import struct

import pytest

from xgcode.images.bmp import BitmapHeader, blank_thumbnail


@pytest.fixture
def thumbnail():
    '''80x60 white BMP, as the slicers embed'''
    return blank_thumbnail()


@pytest.fixture
def minimal_bitmap():
    '''only the headers, 54 bytes'''
    return BitmapHeader().pack()


@pytest.fixture
def gcode():
    return b'; generated by hand\nG28\nG1 X10 Y10 F3000\r\nM104 S0\n\n'


@pytest.fixture
def build_gx():
    '''Build a container the way third party writers do, with struct and
    without going through the library.'''
    def _build_gx(thumbnail, gcode, magic=b'xgcode 1.0\n\0', reserved0=0x1234, reserved1=1):
        gcode_offset = 58 + len(thumbnail)

        buff = magic
        buff += struct.pack('<4i', 0, 58, gcode_offset, gcode_offset)
        buff += struct.pack('<iiih', 1234, 5678, 0, 0)
        buff += struct.pack('<8h', 200, reserved0, 2, 60, 50, 210, 0, reserved1)

        return buff + thumbnail + gcode

    return _build_gx


@pytest.fixture
def gx_bytes(build_gx, thumbnail, gcode):
    return build_gx(thumbnail, gcode)
