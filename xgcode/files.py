'''
Reading and writing containers from/to the filesystem.

The codec works on whole buffers, so the files are read and written in one go.
'''
import logging
import os

from .container import Container


logger = logging.getLogger(__name__)


def load(path) -> Container:
    with open(path, 'rb') as f:
        data = f.read()

    logger.debug('read %d bytes from \'%s\'' % (len(data), path))

    return Container.decode(data)


def save(container, path) -> None:
    '''Write the container next to the destination and then move it in place, so
    that a failure never leaves a partially written file.'''
    data = container.encode()
    path_tmp = '%s.tmp' % os.fspath(path)

    try:
        with open(path_tmp, 'wb') as f:
            f.write(data)
        os.replace(path_tmp, path)
    except OSError:
        if os.path.exists(path_tmp):
            os.remove(path_tmp)
        raise

    logger.debug('written %d bytes to \'%s\'' % (len(data), path))
