"""
Synchronous HTTP client for driving tests against HTTP servers.

Requests are written by hand onto a fresh TCP connection and the response
comes back as raw bytes; reading status lines, headers and bodies out of it
is left to the caller.
"""

import logging
import time
from typing import Dict, Optional, Union
from urllib.parse import urlsplit

from .connection import Connection, SocketStream
from .formatter import RequestFormatter, build_request, join_url
from .models import HeaderMap, HTTPRequest, RawResponse

logger = logging.getLogger(__name__)


class SlingClient:
    """Client bound to one base address, shared by the connection and the formatter."""

    def __init__(self, address: str = "", read_timeout: Optional[float] = None,
                 default_headers: Optional[Union[HeaderMap, Dict[str, str]]] = None):
        self._connection = Connection(address, read_timeout)
        self._formatter = RequestFormatter(address)
        self.default_headers = HeaderMap(default_headers)

    @property
    def address(self) -> str:
        return self._connection.address

    def get_address(self) -> str:
        return self._connection.get_address()

    def set_address(self, address: str):
        self._connection.set_address(address)
        self._formatter.base_address = address

    @property
    def read_timeout(self) -> Optional[float]:
        return self._connection.read_timeout

    def set_read_timeout(self, seconds: Optional[float]):
        self._connection.set_read_timeout(seconds)

    def connect(self) -> SocketStream:
        return self._connection.connect()

    def connect_with_timeout(self) -> SocketStream:
        return self._connection.connect_with_timeout()

    def format_request(self, method: str, url: str) -> str:
        return self._formatter.format_request(method, url)

    def format_request_from_base(self, method: str, relative_path: str) -> str:
        return self._formatter.format_request_from_base(method, relative_path)

    def resolve_url(self, path_or_url: str) -> str:
        """Absolute URLs (any scheme) pass through; anything else is joined to the base address."""
        try:
            parts = urlsplit(path_or_url)
        except ValueError:
            # Sent on unchanged so formatting reports it as InvalidUrl
            return path_or_url
        if parts.scheme and parts.netloc:
            return path_or_url
        return join_url(self.address, path_or_url)

    def request(self, method: str, path_or_url: str,
                headers: Optional[Union[HeaderMap, Dict[str, str]]] = None,
                body: Optional[bytes] = None) -> RawResponse:
        """Send one request and return whatever the server wrote back.

        The request is rendered before connecting, so a bad URL never
        touches the network. The connection goes to the stored address
        even when an absolute URL names another host.
        """
        merged = self.default_headers.copy()
        if headers:
            # Caller headers replace defaults of the same name
            incoming = HeaderMap(headers)
            for name, _ in incoming.items():
                merged.remove(name)
            merged.update(incoming)

        request = HTTPRequest(
            method=method,
            url=self.resolve_url(path_or_url),
            headers=merged,
            body=body
        )
        data = build_request(request)
        logger.debug(f"Request: {request.method} {request.url}")
        return self.send_raw(data)

    def send_raw(self, data: Union[bytes, str]) -> RawResponse:
        """Write data as-is, half-close, and read the response until EOF."""
        if isinstance(data, str):
            data = data.encode('latin-1')

        start_time = time.time()
        with self.connect_with_timeout() as stream:
            stream.write(data)
            stream.shutdown_write()
            response = stream.read_all()

        elapsed = time.time() - start_time
        logger.debug(f"Response: {len(response)} bytes ({elapsed:.3f}s)")
        return RawResponse(data=response, request=data, elapsed=elapsed)

    def close(self):
        """Nothing is held between requests; kept so the client works in a with block."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
