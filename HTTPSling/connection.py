import logging
import socket
from typing import Optional, Tuple, Union

from .exceptions import ConnectionError, TimeoutError

logger = logging.getLogger(__name__)

SCHEME_PREFIX = "http://"


def strip_scheme(address: str) -> str:
    """Drop a leading literal 'http://'; anything else is passed through unchanged."""
    if address.startswith(SCHEME_PREFIX):
        return address[len(SCHEME_PREFIX):]
    return address


def split_host_port(address: str) -> Tuple[str, int]:
    """Split 'host:port' (or '[v6]:port') into its parts for socket.create_connection."""
    host, sep, port = address.rpartition(':')
    if not sep or not host:
        raise ConnectionError(f"Address {address!r} is not in host:port form", address=address)
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
    try:
        port_number = int(port)
    except ValueError:
        raise ConnectionError(f"Address {address!r} has an invalid port", address=address)
    if not 0 <= port_number <= 65535:
        raise ConnectionError(f"Address {address!r} has an out of range port", address=address)
    return host, port_number


def _socket_timeout(seconds: Optional[float]) -> Optional[float]:
    # socket treats 0 as non-blocking; here 0 means block like the platform default
    if seconds is None or seconds == 0:
        return None
    if seconds < 0:
        raise ValueError(f"Read timeout cannot be negative, got {seconds}")
    return float(seconds)


# Transport
class SocketStream:
    """Blocking byte stream over a connected TCP socket."""

    def __init__(self, sock: socket.socket, address: str):
        self._sock = sock
        self.address = address

    @property
    def socket(self) -> socket.socket:
        return self._sock

    def set_read_timeout(self, seconds: Optional[float]):
        """Bound how long each read blocks. 0 or None blocks indefinitely."""
        timeout = _socket_timeout(seconds)
        self._sock.settimeout(timeout)
        logger.debug(f"Read timeout for {self.address} set to {timeout}")

    @property
    def read_timeout(self) -> Optional[float]:
        return self._sock.gettimeout()

    def write(self, data: Union[bytes, str]):
        """Send every byte of data. Text is sent as latin-1, byte for byte."""
        if isinstance(data, str):
            data = data.encode('latin-1')
        # The socket timeout bounds reads only; writes block until sent
        timeout = self._sock.gettimeout()
        try:
            self._sock.settimeout(None)
            self._sock.sendall(data)
        except OSError as e:
            raise ConnectionError(f"Write to {self.address} failed: {e}", address=self.address) from e
        finally:
            self._restore_timeout(timeout)
        logger.debug(f"Wrote {len(data)} bytes to {self.address}")

    def _restore_timeout(self, timeout: Optional[float]):
        if self._sock.fileno() != -1:
            self._sock.settimeout(timeout)

    def read(self, size: int = 8192) -> bytes:
        """Read up to size bytes; b'' means the peer closed its side."""
        try:
            return self._sock.recv(size)
        except socket.timeout as e:
            raise TimeoutError(
                f"Read from {self.address} timed out after {self._sock.gettimeout()} seconds",
                address=self.address
            ) from e
        except OSError as e:
            raise ConnectionError(f"Read from {self.address} failed: {e}", address=self.address) from e

    def read_all(self, chunk_size: int = 8192) -> bytes:
        """Read until the peer closes the connection."""
        chunks = []
        while True:
            chunk = self.read(chunk_size)
            if not chunk:
                break
            chunks.append(chunk)
        data = b''.join(chunks)
        logger.debug(f"Read {len(data)} bytes from {self.address}")
        return data

    def shutdown_write(self):
        """Half-close: tell the peer no more request bytes are coming."""
        self._shutdown(socket.SHUT_WR)

    def shutdown_read(self):
        self._shutdown(socket.SHUT_RD)

    def _shutdown(self, how: int):
        try:
            self._sock.shutdown(how)
        except OSError as e:
            raise ConnectionError(f"Shutdown of {self.address} failed: {e}", address=self.address) from e

    def close(self):
        self._sock.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# Connection Management
class Connection:
    """Connection configuration: a target address plus an optional read timeout.

    Every connect() opens a fresh TCP connection; nothing is pooled or reused.
    """

    def __init__(self, address: str = "", read_timeout: Optional[float] = None):
        self._address = address
        self._read_timeout = None
        self.set_read_timeout(read_timeout)

    @property
    def address(self) -> str:
        return self._address

    def get_address(self) -> str:
        return self._address

    def set_address(self, address: str):
        """Store address as given. It isn't checked until connect()."""
        self._address = address

    @property
    def read_timeout(self) -> Optional[float]:
        return self._read_timeout

    def set_read_timeout(self, seconds: Optional[float]):
        _socket_timeout(seconds)
        self._read_timeout = seconds

    def connect(self) -> SocketStream:
        """Open a blocking TCP connection to the stored address."""
        target = strip_scheme(self._address)
        host, port = split_host_port(target)
        try:
            sock = socket.create_connection((host, port))
        except (OSError, UnicodeError) as e:
            # UnicodeError: the host name can't be IDNA-encoded
            raise ConnectionError(f"Could not connect to {target}: {e}", address=self._address) from e
        logger.debug(f"Connected to {target}")
        return SocketStream(sock, target)

    def connect_with_timeout(self) -> SocketStream:
        """Connect, then apply the configured read timeout to the stream."""
        stream = self.connect()
        try:
            stream.set_read_timeout(self._read_timeout)
        except Exception:
            stream.close()
            raise
        return stream
