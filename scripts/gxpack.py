#!/usr/bin/env python3
'''
Build a container from g-code, the header fields (as written by gxextract.py)
and an image, converted into the 80x60 BMP thumbnail if it isn't one already.

 $ gxpack.py model.gcode model.json model.png model.gx
'''
import json
import logging
import os
import sys

from xgcode.container import Container
from xgcode.files import save
from xgcode.header import new_header
from xgcode.images.bmp import check_bitmap, thumbnail_from_image
from xgcode.exceptions import NotABitmap


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} <gcode file> <header json> <image> <output>')
    sys.exit(1)


def load_thumbnail(path):
    with open(path, 'rb') as f:
        data = f.read()

    try:
        check_bitmap(data)
        return data
    except NotABitmap:
        logger.info(f'converting \'{path}\' into a BMP thumbnail')

    return thumbnail_from_image(path)


if __name__ == '__main__':
    if len(sys.argv) < 5:
        usage(sys.argv[0])

    path_gcode, path_header, path_image, path_output = sys.argv[1:5]

    with open(path_header) as f:
        values = json.load(f)

    with open(path_gcode, 'rb') as f:
        gcode = f.read()

    header = new_header(**values)
    container = Container(header, load_thumbnail(path_image), gcode)

    save(container, path_output)

    logger.info(f'written \'{path_output}\' ({len(container.buffer)} bytes)')
