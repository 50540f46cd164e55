class CRFError(Exception):
    """Base class for the errors raised while estimating a camera response."""


class InsufficientDataError(CRFError):
    """The exposure stack is empty or holds a single exposure."""


class DimensionMismatchError(CRFError):
    """Images of a stack (or a RAW/JPEG pair) differ in size or channels."""


class UnsupportedBackendError(CRFError):
    """No usable least-squares solver."""


class ChannelCountMismatchError(CRFError):
    """The response has a different number of channels than the image."""


class InvalidParameterError(CRFError, ValueError):
    pass
