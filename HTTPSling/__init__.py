"""HTTPSling - a raw synchronous HTTP/1.1 client for testing HTTP servers."""

# Import key classes for easier access
from .client import SlingClient
from .config import ClientConfig, create_client, load_client_config
from .connection import Connection, SocketStream
from .exceptions import (
    SlingError,
    ConnectionError,
    TimeoutError,
    RequestFormatError,
    InvalidUrl,
    MissingHost,
    MissingPort,
    InvalidUtf8
)
from .formatter import RequestFormatter, build_request, format_request, join_url, parse_target
from .models import HeaderMap, HTTPRequest, ParsedTarget, RawResponse

__version__ = "0.1.0"
