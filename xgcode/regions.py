'''
Byte ranges of the thumbnail and of the g-code inside the buffer of a container.

The regions don't own any data, they are (offset, length) couples used to slice
the single buffer owned by the container.
'''
import logging
from collections import namedtuple

from .header import ThumbnailLayout, encode_header
from .images import bmp
from .exceptions import (
    NotABitmap,
    TruncatedThumbnail,
    TruncatedPayload,
)


logger = logging.getLogger(__name__)


def as_bytes(data, what) -> bytes:
    '''The payload and the thumbnail travel untouched: no implicit encoding of text.'''
    if isinstance(data, str):
        raise TypeError(f'{what} must be bytes, not str')

    return bytes(data)


class Region(namedtuple('Region', ['offset', 'length'])):
    __slots__ = ()

    @property
    def end(self):
        return self.offset + self.length

    def extract(self, buffer) -> bytes:
        return bytes(buffer[self.offset:self.end])

    def shift(self, delta):
        return self._replace(offset=self.offset + delta)


class ThumbnailRegion(object):

    @staticmethod
    def locate(data, header) -> Region:
        '''Find the thumbnail using the strategy declared by the header layout.'''
        offset = header.get_thumbnail_offset()

        if header.thumbnail_layout == ThumbnailLayout.EXPLICIT:
            length = header.get_thumbnail_length()
        else:
            length = ThumbnailRegion.scan_length(data, offset)

        available = max(len(data) - offset, 0)
        if length > available:
            raise TruncatedThumbnail(
                message=f'thumbnail at 0x{offset:x} is {length} bytes, only {available} available')

        logger.debug(f'thumbnail at 0x{offset:x} ({length} bytes)')

        return Region(offset, length)

    @staticmethod
    def scan_length(data, offset) -> int:
        '''Size of the bitmap at "offset" as declared by its own file header.'''
        if len(data) - offset < bmp.BitmapFileHeader.calcsize():
            raise TruncatedThumbnail(message=f'no room for a bitmap file header at 0x{offset:x}')

        return bmp.bitmap_size(data[offset:])

    @staticmethod
    def check_size(header, thumbnail) -> None:
        '''When the layout takes the size from the bitmap, the declared size must be
        the real one: otherwise the g-code wouldn't be found where it was put.'''
        if header.thumbnail_layout != ThumbnailLayout.BITMAP_SIZE:
            return

        declared = bmp.bitmap_size(thumbnail)
        if declared != len(thumbnail):
            raise NotABitmap(
                chain=['file_size'],
                message=f'declared size {declared} differs from the actual {len(thumbnail)} bytes')

    @staticmethod
    def replace(container, thumbnail):
        '''Returns a new container with the thumbnail substituted; the payload moves
        by the difference in size.

        The new thumbnail must pass the bitmap signature check, otherwise NotABitmap
        is raised and nothing is built.'''
        thumbnail = as_bytes(thumbnail, 'thumbnail')
        bmp.check_bitmap(thumbnail)

        header = container.header
        ThumbnailRegion.check_size(header, thumbnail)

        header.set_thumbnail_size(len(thumbnail))

        old = container.thumbnail_region
        delta = len(thumbnail) - old.length

        logger.debug(f'replacing thumbnail: {old.length} -> {len(thumbnail)} bytes')

        return container.from_buffer(
            header,
            encode_header(header) + thumbnail + container.payload,
            Region(old.offset, len(thumbnail)),
            container.payload_region.shift(delta),
        )


class PayloadRegion(object):

    @staticmethod
    def locate(data, header, thumbnail_end) -> Region:
        '''The g-code starts right after the thumbnail and runs to the end.'''
        if thumbnail_end > len(data):
            raise TruncatedPayload(
                message=f'{header.__class__.__name__} places the g-code at 0x{thumbnail_end:x}, past the end (0x{len(data):x})')

        return Region(thumbnail_end, len(data) - thumbnail_end)

    @staticmethod
    def replace(container, payload):
        '''Returns a new container with the g-code substituted; being the last part
        nothing else moves.'''
        payload = as_bytes(payload, 'payload')
        offset = container.payload_region.offset

        return container.from_buffer(
            container.header,
            container.buffer[:offset] + payload,
            container.thumbnail_region,
            Region(offset, len(payload)),
        )
