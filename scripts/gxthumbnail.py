#!/usr/bin/env python3
'''
Show the thumbnail embedded into a container.
'''
import logging
import os
import sys

from PIL import Image

from xgcode.files import load
from xgcode.images.bmp import decode_bitmap


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logger.setLevel(level=logging.INFO if 'DEBUG' not in os.environ else logging.DEBUG)


def usage(progname):
    print(f'usage: {progname} <gx file>')
    sys.exit(1)


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    container = load(sys.argv[1])

    bitmap = decode_bitmap(container.thumbnail)
    logger.info(f'thumbnail {bitmap.width}x{bitmap.height}')

    image = Image.frombytes('RGB', (bitmap.width, bitmap.height), bitmap.pixels)
    image.show()
