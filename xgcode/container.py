'''
# XGCode container

    .----------------------.  0x00
    | header               |
    +----------------------+  thumbnail offset (0x3a)
    | BMP thumbnail        |
    +----------------------+  g-code offset
    | g-code               |
    '----------------------'  end of file

The container owns a single buffer; the thumbnail and the g-code are regions
of it. It's never modified in place: the with_*() methods return a new container.
'''
import copy
import logging
from enum import Enum

from .header import decode_header, encode_header
from .regions import Region, ThumbnailRegion, PayloadRegion, as_bytes
from .exceptions import XGCodeException, ContainerDecodeError


logger = logging.getLogger(__name__)


class DecodeStage(Enum):
    HEADER    = 'header'
    THUMBNAIL = 'thumbnail'
    PAYLOAD   = 'payload'


class Container(object):

    def __init__(self, header, thumbnail=b'', payload=b''):
        '''Build a container from its parts, the layout fields of the header
        (a copy of it) are recomputed from the size of the thumbnail.

        With a layout that takes the size from the bitmap, a thumbnail declaring
        a different size raises NotABitmap.'''
        thumbnail = as_bytes(thumbnail, 'thumbnail')
        payload = as_bytes(payload, 'payload')

        header = copy.deepcopy(header)
        ThumbnailRegion.check_size(header, thumbnail)
        header.set_thumbnail_size(len(thumbnail))

        offset = header.get_thumbnail_offset()

        self._header = header
        self._buffer = encode_header(header) + thumbnail + payload
        self._thumbnail_region = Region(offset, len(thumbnail))
        self._payload_region = Region(offset + len(thumbnail), len(payload))

    @classmethod
    def from_buffer(cls, header, buffer, thumbnail_region, payload_region):
        '''Adopt an already laid out buffer, no check is done.'''
        container = cls.__new__(cls)
        container._header = header
        container._buffer = bytes(buffer)
        container._thumbnail_region = thumbnail_region
        container._payload_region = payload_region

        return container

    @classmethod
    def decode(cls, data):
        '''Decode a whole container, raising ContainerDecodeError with the stage
        that failed.'''
        data = as_bytes(data, 'container')

        stage = DecodeStage.HEADER
        try:
            header = decode_header(data)

            stage = DecodeStage.THUMBNAIL
            thumbnail_region = ThumbnailRegion.locate(data, header)

            stage = DecodeStage.PAYLOAD
            payload_region = PayloadRegion.locate(data, header, thumbnail_region.end)
        except XGCodeException as e:
            logger.debug(f'decoding failed at {stage.value} stage: {e}')
            raise ContainerDecodeError(stage, e) from e

        return cls.from_buffer(header, data, thumbnail_region, payload_region)

    def encode(self) -> bytes:
        return encode_header(self._header) + self.thumbnail + self.payload

    def __repr__(self):
        return '<%s(%s, thumbnail=%r, payload=%r)>' % (
            self.__class__.__name__,
            self._header.__class__.__name__,
            self._thumbnail_region,
            self._payload_region,
        )

    def __eq__(self, other):
        if not isinstance(other, Container):
            return NotImplemented

        return self.encode() == other.encode()

    __hash__ = None

    @property
    def header(self):
        '''A copy of the header: use with_header_field() to change it.'''
        return copy.deepcopy(self._header)

    @property
    def version(self):
        return self._header.version

    @property
    def buffer(self) -> bytes:
        return self._buffer

    @property
    def thumbnail_region(self) -> Region:
        return self._thumbnail_region

    @property
    def payload_region(self) -> Region:
        return self._payload_region

    @property
    def thumbnail(self) -> bytes:
        return self._thumbnail_region.extract(self._buffer)

    @property
    def payload(self) -> bytes:
        return self._payload_region.extract(self._buffer)

    def with_header_field(self, name, value):
        '''The fields describing the layout are computed again from the thumbnail,
        whatever value is passed for them.'''
        header = self.header
        header.set_field(name, value)
        header.set_thumbnail_size(self._thumbnail_region.length)

        buffer = encode_header(header) + self._buffer[self._thumbnail_region.offset:]

        return self.from_buffer(header, buffer, self._thumbnail_region, self._payload_region)

    def with_thumbnail(self, thumbnail):
        return ThumbnailRegion.replace(self, thumbnail)

    def with_payload(self, payload):
        return PayloadRegion.replace(self, payload)
