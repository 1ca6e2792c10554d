import pytest
from PIL import Image

from xgcode.exceptions import NotABitmap
from xgcode.images.bmp import (
    Bitmap,
    BitmapCompression,
    BitmapHeader,
    THUMBNAIL_SIZE,
    bitmap_size,
    check_bitmap,
    decode_bitmap,
    encode_bitmap,
    read_file_header,
    thumbnail_from_image,
)


def test_minimal_bitmap(minimal_bitmap):
    assert len(minimal_bitmap) == 54
    assert minimal_bitmap[:2] == b'BM'
    assert bitmap_size(minimal_bitmap) == 54

    check_bitmap(minimal_bitmap)


def test_check_bitmap_rejects():
    with pytest.raises(NotABitmap):
        check_bitmap(b'GIF89a' + b'\x00' * 0x20)

    with pytest.raises(NotABitmap):
        check_bitmap(b'BM\x36\x00')

    with pytest.raises(NotABitmap):
        check_bitmap(b'')


def test_thumbnail_headers(thumbnail):
    """The 80x60x24 BMP produced by Pillow is what the printers expect."""
    assert len(thumbnail) == 54 + 80 * 60 * 3

    header = BitmapHeader(thumbnail)

    assert header.file.file_size.value == len(thumbnail)
    assert header.file.pixels_offset.value == 54
    assert header.info.width.value == 80
    assert header.info.height.value == 60
    assert header.info.depth.value == 24
    assert header.info.compression.value == BitmapCompression.BI_RGB
    assert str(header.info) == '80x60x24'

    assert read_file_header(thumbnail).magic.value == b'BM'


def test_decode_bitmap(thumbnail):
    bitmap = decode_bitmap(thumbnail)

    assert (bitmap.width, bitmap.height) == THUMBNAIL_SIZE
    assert bitmap.pixels == b'\xff' * (80 * 60 * 3)


def test_encode_bitmap():
    pixels = b'\xff\x00\x00' + b'\x00\xff\x00' + b'\x00\x00\xff' + b'\x10\x20\x30'

    data = encode_bitmap(Bitmap(2, 2, pixels))

    check_bitmap(data)
    assert bitmap_size(data) == len(data)
    assert decode_bitmap(data).pixels == pixels


def test_decode_bitmap_rejects_other_formats(tmp_path):
    path = tmp_path / 'image.png'
    Image.new('RGB', (4, 4)).save(path, format='PNG')

    with pytest.raises(NotABitmap):
        decode_bitmap(path.read_bytes())

    with pytest.raises(NotABitmap):
        decode_bitmap(b'not an image at all')


def test_thumbnail_from_image(tmp_path):
    path = tmp_path / 'render.png'
    Image.new('RGBA', (320, 240), color=(10, 20, 30, 255)).save(path, format='PNG')

    data = thumbnail_from_image(str(path))

    bitmap = decode_bitmap(data)
    assert (bitmap.width, bitmap.height) == (80, 60)
    assert bitmap.pixels[:3] == b'\x0a\x14\x1e'

    data = thumbnail_from_image(Image.new('L', (8, 8)), size=(4, 2))
    assert decode_bitmap(data).width == 4


def test_thumbnail_from_garbage(tmp_path):
    path = tmp_path / 'garbage.png'
    path.write_bytes(b'nothing to see here')

    with pytest.raises(NotABitmap):
        thumbnail_from_image(str(path))
