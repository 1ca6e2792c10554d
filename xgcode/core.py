"""
Core module for the abstraction of a binary record

"""
import logging
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import (
    ChunkUnpackException,
    UnpackException,
)


logger = logging.getLogger(__name__)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk can contain sub-chunks; the fields are laid out one after the other
    in the order of declaration.

    Passing a bytes-like object to the constructor unpacks it.
    """

    def __init__(self, data=None, **kwargs):
        super().__init__(**kwargs)

        # now we have setup all the fields necessary and we can unpack if
        # some data is passed with the constructor
        if data is not None:
            stream = data if isinstance(data, Stream) else Stream(data)
            logger.debug('unpacking \'%s\' from %r' % (self.__class__.__name__, stream))
            self.unpack(stream)
        else:
            self.relayout()

    @classmethod
    def calcsize(cls) -> int:
        '''Size in bytes of the chunk, like struct.calcsize() does for formats'''
        return cls().size

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def get_field(self, name) -> Field:
        if name not in self._meta.fields:
            raise AttributeError(f"'{self.__class__.__name__}' has no field named '{name}'")

        return getattr(self, name)

    def set_field(self, name, value) -> None:
        self.get_field(name).value = value

    def get_values(self) -> Dict[str, object]:
        return {name: field.value for name, field in self.get_fields()}

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented

        return self.raw == other.raw

    __hash__ = None

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def _get_value(self):
        return self.get_values()

    def _set_value(self, values):
        for name, value in values.items():
            self.set_field(name, value)

    def _get_size(self):
        '''the size parameter MUST not be set but MUST be derived from the subchunks'''
        size = 0
        for _, field in self.get_fields():
            size += field.size

        return size

    def _get_raw(self):
        value = b''
        for field_name, field_instance in self.get_fields():
            field_raw = field_instance.raw
            logger.debug("field '{}' raw={}".format(field_name, field_raw))
            value += field_raw

        return value

    def _set_raw(self, raw):
        self.unpack(Stream(raw))

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''This method triggers the chunk's children to reset the offsets
        in order to pack correctly.

        In practice it's like packing() but it's only interested in the sizes
        of the chunks.'''
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            logger.debug('relayouting %s.%s' % (self.__class__.__name__, field_name))
            size += field_instance.relayout(offset=offset + size)

        return size

    def pack(self, stream=None, relayout=True):
        '''
        Encode the chunk into its raw representation: each field is written
        at its own offset so the stream can be shared with the father.

        It returns the content of the whole stream.
        '''
        if relayout:
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        for field_name, field_instance in self.get_fields():
            if field_instance.offset is None:
                raise AttributeError(f'offset for field named "{field_name}" {field_instance!r} is not defined!')

            logger.debug('packing %s.%s at offset %08x' % (self.__class__.__name__, field_name, field_instance.offset))
            # we call pack() on the subchunks
            field_instance.pack(stream=stream, relayout=False)

        return stream.getvalue()

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        The fields are read one after the other starting from the actual position
        of the stream; if a field fails, the exception raised reports the chain
        of field names to it.

        When the chunk defines a validate() method, it's called at the end and it's
        expected to raise if the values are not consistent.
        '''
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            offset = stream.tell()
            logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, offset))

            try:
                field.unpack(stream)
            except (UnpackException, ChunkUnpackException) as e:
                raise ChunkUnpackException(chain=[field_name] + e.chain, message=e.message) from e
            field.offset = offset

        if hasattr(self, 'validate'):
            self.validate()
