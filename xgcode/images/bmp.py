'''
# Windows Bitmap

The thumbnails embedded into the containers are BMP files, usually 80x60 pixels
with 24 bits per pixel (the printers don't cope with anything else).

A BMP starts with a 14 bytes file header, whose "file_size" field tells the size
of the whole file, followed by the DIB header (here only the 40 bytes
BITMAPINFOHEADER is described) and by the pixels.

The pixels are never interpreted here: decoding and encoding images is left
to Pillow.
'''
import io
import logging
from collections import namedtuple
from enum import Enum

from PIL import Image, UnidentifiedImageError

from ..core import Chunk
from ..enum import Compliant
from .. import fields
from ..exceptions import XGCodeException, NotABitmap


logger = logging.getLogger(__name__)

THUMBNAIL_SIZE = (80, 60)

Bitmap = namedtuple('Bitmap', ['width', 'height', 'pixels'])


class BitmapCompression(Enum):
    BI_RGB       = 0
    BI_RLE8      = 1
    BI_RLE4      = 2
    BI_BITFIELDS = 3
    BI_JPEG      = 4
    BI_PNG       = 5


class BitmapFileHeader(Chunk):
    magic         = fields.StringField(2, default=b'BM', is_magic=True)
    file_size     = fields.StructField('I', default=54)
    reserved1     = fields.StructField('H')
    reserved2     = fields.StructField('H')
    pixels_offset = fields.StructField('I', default=54)


class BitmapInfoHeader(Chunk):
    header_size      = fields.StructField('I', default=40)
    width            = fields.StructField('i')
    height           = fields.StructField('i')  # negative means top-down
    planes           = fields.StructField('H', default=1)
    depth            = fields.StructField('H', default=24)
    compression      = fields.StructField('I', enum=BitmapCompression, default=BitmapCompression.BI_RGB)
    image_size       = fields.StructField('I')
    x_ppm            = fields.StructField('i')
    y_ppm            = fields.StructField('i')
    colors_used      = fields.StructField('I')
    colors_important = fields.StructField('I')

    def __str__(self):
        return '%dx%dx%d' % (
            self.width.value,
            abs(self.height.value),
            self.depth.value,
        )


class BitmapHeader(Chunk):
    '''With the default values it packs into the smallest valid bitmap: a 0x0 image
    with only the headers (54 bytes).'''
    file = BitmapFileHeader()
    info = BitmapInfoHeader()


def read_file_header(data) -> BitmapFileHeader:
    '''Unpack the file header at the start of "data", raising NotABitmap if it's
    not possible.'''
    try:
        return BitmapFileHeader(bytes(data[:BitmapFileHeader.calcsize()]), compliant=Compliant.MAGIC)
    except XGCodeException as e:
        raise NotABitmap(chain=e.chain, message=e.message or 'not a bitmap') from e


def check_bitmap(data) -> None:
    '''Minimal signature check: the data must start with a BMP file header.'''
    read_file_header(data)


def bitmap_size(data) -> int:
    '''Size of the bitmap starting at the beginning of "data" as declared by itself.'''
    return read_file_header(data).file_size.value


def decode_bitmap(data) -> Bitmap:
    '''Returns the dimensions and the RGB pixels of the image.'''
    try:
        with Image.open(io.BytesIO(bytes(data))) as image:
            if image.format != 'BMP':
                raise NotABitmap(message=f'the image is a {image.format}, not a BMP')

            rgb = image.convert('RGB')
            return Bitmap(rgb.width, rgb.height, rgb.tobytes())
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise NotABitmap(message=str(e)) from e


def encode_bitmap(bitmap: Bitmap) -> bytes:
    '''Encode RGB pixels as 24 bits BMP.'''
    image = Image.frombytes('RGB', (bitmap.width, bitmap.height), bitmap.pixels)

    output = io.BytesIO()
    image.save(output, format='BMP')

    return output.getvalue()


def thumbnail_from_image(image, size=THUMBNAIL_SIZE) -> bytes:
    '''Convert an image (a path, a file object or a PIL.Image) into the BMP thumbnail
    the printers can show.'''
    if not isinstance(image, Image.Image):
        try:
            with Image.open(image) as opened:
                return thumbnail_from_image(opened, size=size)
        except UnidentifiedImageError as e:
            raise NotABitmap(message=str(e)) from e

    logger.debug(f'converting {image.format} {image.size} into thumbnail {size}')

    thumbnail = image.convert('RGB').resize(size)

    return encode_bitmap(Bitmap(thumbnail.width, thumbnail.height, thumbnail.tobytes()))


def blank_thumbnail(size=THUMBNAIL_SIZE, color=(255, 255, 255)) -> bytes:
    image = Image.new('RGB', size, color=color)

    return encode_bitmap(Bitmap(image.width, image.height, image.tobytes()))
