"""
Builds raw HTTP/1.1 request text from a method and an absolute URL.

The formatter knows nothing about schemes: the port must be written in the
URL, there's no table of default ports to fall back on.
"""

from typing import Optional
from urllib.parse import urlsplit

from .exceptions import InvalidUrl, MissingHost, MissingPort
from .models import HTTPRequest, ParsedTarget
from .utils import has_control_chars, validate_method

HTTP_VERSION = "HTTP/1.1"
DEFAULT_ACCEPT = "*/*"


def parse_target(url: str) -> ParsedTarget:
    """Split an absolute URL into host, port, path and query.

    Raises:
        InvalidUrl: the string can't be parsed, or holds characters that
            can't go on a request line.
        MissingHost: no host component.
        MissingPort: no explicit port.
    """
    if not isinstance(url, str):
        raise InvalidUrl(f"URL must be a string, got {type(url)!r}", url=url)
    if has_control_chars(url):
        raise InvalidUrl(f"URL contains whitespace or control characters: {url!r}", url=url)
    if not url.isascii():
        raise InvalidUrl(f"URL contains non-ASCII characters: {url!r}", url=url)

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise InvalidUrl(f"Invalid URL {url!r}: {e}", url=url) from e

    if not parts.hostname:
        raise MissingHost(f"URL has no host: {url!r}", url=url)
    # '//host:port/x' names a host but is still relative
    if not parts.scheme:
        raise InvalidUrl(f"URL is not absolute: {url!r}", url=url)
    if port is None:
        raise MissingPort(f"URL has no port: {url!r}", url=url)

    return ParsedTarget(
        host=parts.hostname,
        port=port,
        path=parts.path or '/',
        query=parts.query
    )


def join_url(base: str, path: str) -> str:
    """Join a base address and a relative path.

    Only the separator is touched: one '/' is inserted when neither side has
    it, and one is dropped when both do. Slashes inside path are kept.
    """
    if base.endswith('/') and path.startswith('/'):
        return base[:-1] + path
    if not base.endswith('/') and not path.startswith('/'):
        return f"{base}/{path}"
    return base + path


def _request_head(method: str, target: ParsedTarget) -> str:
    validate_method(method)
    return f"{method.upper()} {target.path_and_query} {HTTP_VERSION}\r\n"


def format_request(method: str, url: str) -> str:
    """Render the request line and minimal header block for method and url."""
    target = parse_target(url)
    return (
        _request_head(method, target)
        + f"Host: {target.authority}\r\n"
        + f"Accept: {DEFAULT_ACCEPT}\r\n"
        + "\r\n"
    )


def build_request(request: HTTPRequest) -> bytes:
    """Render a full request descriptor, headers and body included.

    Host and Accept are filled in unless the descriptor carries its own;
    Content-Length is added for a body unless already present. A descriptor
    without headers or body renders the same bytes as format_request().
    """
    target = parse_target(request.url)
    headers = request.headers

    lines = [_request_head(request.method, target)]
    if 'Host' not in headers:
        lines.append(f"Host: {target.authority}\r\n")
    if 'Accept' not in headers:
        lines.append(f"Accept: {DEFAULT_ACCEPT}\r\n")
    for name, value in headers.items():
        lines.append(f"{name}: {value}\r\n")
    if request.body is not None and 'Content-Length' not in headers:
        lines.append(f"Content-Length: {len(request.body)}\r\n")
    lines.append("\r\n")

    head = "".join(lines).encode('latin-1')
    return head + (request.body or b'')


class RequestFormatter:
    """Formats requests against a stored base address."""

    def __init__(self, base_address: Optional[str] = None):
        self.base_address = base_address

    def format_request(self, method: str, url: str) -> str:
        return format_request(method, url)

    def format_request_from_base(self, method: str, relative_path: str) -> str:
        """Format a request for relative_path under the stored base address."""
        if self.base_address is None:
            raise MissingHost("No base address set", url=relative_path)
        return format_request(method, join_url(self.base_address, relative_path))
