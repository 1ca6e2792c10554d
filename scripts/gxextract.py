#!/usr/bin/env python3
'''
Split a container into its three parts:

 - <prefix>.json   the header fields
 - <prefix>.bmp    the thumbnail
 - <prefix>.gcode  the g-code

The json can be edited and passed to gxpack.py together with the other two
files to build the container again.
'''
import json
import logging
import os
import sys

from xgcode.files import load


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} <gx file> <output prefix>')
    sys.exit(1)


def header_to_dict(header):
    values = {'version': header.version.value}

    for name, field in header.get_fields():
        if name == 'magic' or name in header.layout_fields:
            continue
        values[name] = field.value

    return values


if __name__ == '__main__':
    if len(sys.argv) < 3:
        usage(sys.argv[0])

    path, prefix = sys.argv[1:3]

    container = load(path)

    with open(f'{prefix}.json', 'w') as f:
        json.dump(header_to_dict(container.header), f, indent=2)

    with open(f'{prefix}.bmp', 'wb') as f:
        f.write(container.thumbnail)

    with open(f'{prefix}.gcode', 'wb') as f:
        f.write(container.payload)

    logger.info(f'extracted {prefix}.json, {prefix}.bmp ({len(container.thumbnail)} bytes), '
                f'{prefix}.gcode ({len(container.payload)} bytes)')
