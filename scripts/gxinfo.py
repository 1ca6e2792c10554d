#!/usr/bin/env python3
'''
Dump the header of a .gx/.g3drem file together with the position of the
thumbnail and of the g-code.

 $ gxinfo.py 20mm_Box.gx
'''
import logging
import os
import sys

from xgcode.files import load
from xgcode.exceptions import ContainerDecodeError, NotABitmap
from xgcode.images.bmp import read_file_header


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} <gx file>')
    sys.exit(1)


def dump_header(header):
    print(f'''Header ({header.__class__.__name__}, version {header.version.value}):''')
    for name, field in header.get_fields():
        value = field.value
        if isinstance(value, bytes):
            value = repr(value)
        print(f'  {name:<24} {value!s:<24} (offset 0x{field.offset:02x}, {field.size} bytes)')


def dump_regions(container):
    thumbnail = container.thumbnail_region
    payload = container.payload_region
    print(f'''Regions:
  thumbnail                0x{thumbnail.offset:08x}-0x{thumbnail.end:08x} ({thumbnail.length} bytes)
  g-code                   0x{payload.offset:08x}-0x{payload.end:08x} ({payload.length} bytes)''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]

    try:
        container = load(path)
    except ContainerDecodeError as e:
        logger.error(f'{path}: {e}')
        sys.exit(2)

    dump_header(container.header)
    dump_regions(container)

    try:
        print(f'Thumbnail file header:\n{read_file_header(container.thumbnail)}')
    except NotABitmap as e:
        logger.warning(f'the thumbnail is not a bitmap: {e}')
