class XGCodeException(Exception):
    '''Base class to extend in order to throw exception in xgcode.

    It takes the chain of the fields that caused the exception (outermost first)
    and an optional human readable message.
    '''

    def __init__(self, chain=None, message=None):
        self.chain = chain if chain is not None else []
        self.message = message
        super().__init__(self.describe())

    def describe(self):
        where = '.'.join(self.chain)
        if where and self.message:
            return f'{where}: {self.message}'

        return self.message or where


class UnpackException(XGCodeException):
    pass


class MagicException(XGCodeException):
    pass


class ChunkUnpackException(XGCodeException):
    pass


class RangeError(XGCodeException, ValueError):
    '''A value doesn't fit the physical width of the field it's assigned to.'''
    pass


class MalformedHeader(XGCodeException):
    pass


class TruncatedThumbnail(XGCodeException):
    pass


class TruncatedPayload(XGCodeException):
    pass


class NotABitmap(XGCodeException):
    pass


class ContainerDecodeError(XGCodeException):
    '''Raised by Container.decode(), it tells at which stage the decoding
    stopped and keeps the original exception as "cause".'''

    def __init__(self, stage, cause):
        self.stage = stage
        self.cause = cause
        super().__init__(message=f'{stage.value} stage failed: {cause}')
        self.chain = list(getattr(cause, 'chain', []))
