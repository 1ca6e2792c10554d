import io
import logging

from .exceptions import UnpackException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around an in-memory buffer to
    uniform its properties: mainly we need random access via seek()
    and reads that fail loudly when the data is not there.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj
        self.history = []

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of object to use as stream' % self._type.__name__)

        init_method()

    def __repr__(self):
        return '<%s(%s, size=%d)>' % (self.__class__.__name__, self._type.__name__, len(self))

    def __len__(self):
        return len(self.obj.getvalue())

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def init_memoryview(self):
        self.obj = io.BytesIO(self.obj.tobytes())

    def init_BytesIO(self):
        pass

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

        return self

    def tell(self):
        return self.obj.tell()

    def read_exact(self, size):
        '''Read exactly "size" bytes or raise UnpackException.'''
        offset = self.tell()
        data = self.obj.read(size)

        if len(data) != size:
            logger.debug('short read at offset 0x%x: wanted %d bytes, got %d' % (offset, size, len(data)))
            raise UnpackException(message=f'expected {size} bytes at offset 0x{offset:x}, only {len(data)} available')

        return data

    def read_all(self):
        '''Returns the data from the actual position up to the end.'''
        return self.obj.read()

    def write(self, data):
        return self.obj.write(data)

    def getvalue(self):
        return self.obj.getvalue()

    def save(self):
        '''Remember the actual position, restore() moves back to it.'''
        self.history.append(self.obj.tell())

    def restore(self):
        self.obj.seek(self.history.pop())

