import os
import socket
import threading

import pytest

RESPONSE = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: text/plain\r\n"
    b"Content-Length: 9\r\n"
    b"Connection: close\r\n"
    b"\r\n"
    b"from home"
)


class RecordingServer:
    """One-thread TCP server that stores each raw request and answers with a canned response."""

    def __init__(self, response=RESPONSE, wait_for_eof=True, delay=None):
        self.response = response
        self.wait_for_eof = wait_for_eof
        self.delay = delay
        self.requests = []
        self._stop = threading.Event()
        self._release = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(('127.0.0.1', 0))
        self._sock.listen(5)
        self._sock.settimeout(0.2)
        self.port = self._sock.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def address(self):
        return f"127.0.0.1:{self.port}"

    @property
    def url(self):
        return f"http://127.0.0.1:{self.port}"

    def start(self):
        self._thread.start()
        return self

    def stop(self):
        self._stop.set()
        self._release.set()
        self._thread.join(timeout=5)
        self._sock.close()

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            with conn:
                conn.settimeout(5)
                self.requests.append(self._read_request(conn))
                if self.delay is not None:
                    self._release.wait(self.delay)
                try:
                    conn.sendall(self.response)
                except OSError:
                    pass

    def _read_request(self, conn):
        data = b''
        while True:
            try:
                chunk = conn.recv(4096)
            except OSError:
                break
            if not chunk:
                break
            data += chunk
            if not self.wait_for_eof and b'\r\n\r\n' in data:
                break
        return data


@pytest.fixture
def server():
    srv = RecordingServer().start()
    yield srv
    srv.stop()


@pytest.fixture
def slow_server():
    srv = RecordingServer(wait_for_eof=False, delay=2.0).start()
    yield srv
    srv.stop()


@pytest.fixture
def closed_port():
    # Bind and release a port so nothing is listening on it
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def live_address():
    address = os.getenv("SLING_TEST_ADDR")
    if not address:
        pytest.skip("SLING_TEST_ADDR not set; skipping tests against a live server")
    return address
