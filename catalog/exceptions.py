class OrderingError(Exception):
    """Base class for failures of an ordered collection"""


class NotFound(OrderingError):
    """A referenced id is not part of the sequence being reordered"""


class StoreUnavailable(OrderingError):
    """The backing database could not be reached while reading"""


class PartialWriteRejected(OrderingError):
    """A batch order write was rejected and rolled back as a whole"""

    def __init__(self, message, pairs=None):
        super().__init__(message)
        self.pairs = list(pairs or [])


class UploadFailed(Exception):
    """An image could not be stored; callers keep the previous reference"""
