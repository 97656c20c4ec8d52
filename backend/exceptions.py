"""Exceptions raised by the playback engine and its service clients"""


class TracePlaybackError(Exception):
    """Base for all trace playback errors"""


class TraceIndexError(TracePlaybackError, IndexError):
    """A step index outside the trace was read"""

    def __init__(self, index, length):
        self.index = index
        self.length = length
        super().__init__(f"step {index} out of range for trace of length {length}")


class ServiceError(TracePlaybackError):
    """An external service could not produce a usable result"""


class ServiceUnavailableError(ServiceError):
    """The service could not be reached, or answered with a non-JSON or error response"""


class MalformedPayloadError(ServiceError):
    """The service answered, but the payload does not have the expected shape"""

    def __init__(self, msg, payload=None):
        self.msg = msg
        self.payload = payload
        super().__init__(msg)
