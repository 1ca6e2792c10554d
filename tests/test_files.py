import pytest

from xgcode.container import Container
from xgcode.exceptions import ContainerDecodeError
from xgcode.files import load, save


def test_load(tmp_path, gx_bytes, gcode):
    path = tmp_path / 'box.gx'
    path.write_bytes(gx_bytes)

    container = load(path)

    assert container.payload == gcode
    assert container.encode() == gx_bytes


def test_save(tmp_path, gx_bytes):
    path = tmp_path / 'box.gx'

    save(Container.decode(gx_bytes).with_header_field('print_speed', 80), path)

    assert load(str(path)).header.print_speed.value == 80
    assert [_.name for _ in tmp_path.iterdir()] == ['box.gx']


def test_save_overwrites(tmp_path, gx_bytes):
    path = tmp_path / 'box.gx'
    path.write_bytes(b'old content')

    save(Container.decode(gx_bytes), path)

    assert path.read_bytes() == gx_bytes


def test_load_garbage(tmp_path):
    path = tmp_path / 'garbage.gx'
    path.write_bytes(b'\x00' * 100)

    with pytest.raises(ContainerDecodeError):
        load(path)
