from typing import Optional

# Exceptions
class SlingError(Exception):
    """Base exception for HTTPSling errors."""
    pass

class ConnectionError(SlingError):
    """Raised when the transport cannot connect, or fails during I/O."""
    def __init__(self, message: str, address: Optional[str] = None):
        super().__init__(message)
        self.address = address

class TimeoutError(ConnectionError):
    """Raised when a read exceeds the configured read timeout."""
    pass

class RequestFormatError(SlingError, ValueError):
    """Base class for errors raised while formatting a request."""
    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url

class InvalidUrl(RequestFormatError):
    """Raised when the string cannot be parsed as a URL at all."""
    pass

class MissingHost(RequestFormatError):
    """Raised when the URL has no host component."""
    pass

class MissingPort(RequestFormatError):
    """Raised when the URL has no explicit port."""
    pass

class InvalidUtf8(SlingError):
    """Raised when response bytes are decoded as text and are not valid UTF-8."""
    pass
