"""
Pytest configuration and fixtures for dwm-msg tests.

Provides an in-memory socket that transfers a few bytes per call and
injects transient errors, and a threaded fake dwm server on a real Unix
socket for end-to-end runs.
"""

import errno
import os
import shutil
import socket
import struct
import sys
import tempfile
import threading
from pathlib import Path
from typing import Generator, List, Tuple

import pytest

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dwm_msg.codec import HEADER_SIZE, MAGIC  # noqa: E402
from dwm_msg.models import MessageType  # noqa: E402


def make_frame(message_type: int, payload: bytes) -> bytes:
    """Build a frame by hand, independently of the codec under test."""
    return MAGIC + struct.pack("<I", len(payload)) + bytes([message_type]) + payload


class ChunkedSocket:
    """Socket stand-in returning at most ``chunk_size`` bytes per call.

    Every ``interrupt_every``-th send/recv_into call raises InterruptedError
    before transferring anything.
    """

    def __init__(self, incoming: bytes = b"", chunk_size: int = 1, interrupt_every: int = 0):
        self.incoming = bytearray(incoming)
        self.sent = bytearray()
        self.chunk_size = chunk_size
        self.interrupt_every = interrupt_every
        self.calls = 0
        self.interrupts = 0
        self.closed = False

    def _maybe_interrupt(self) -> None:
        self.calls += 1
        if self.interrupt_every and self.calls % self.interrupt_every == 0:
            self.interrupts += 1
            raise InterruptedError(errno.EINTR, "Interrupted system call")

    def send(self, data) -> int:
        self._maybe_interrupt()
        chunk = bytes(data[:self.chunk_size])
        self.sent += chunk
        return len(chunk)

    def recv_into(self, buffer) -> int:
        self._maybe_interrupt()
        n = min(len(buffer), self.chunk_size, len(self.incoming))
        buffer[:n] = self.incoming[:n]
        del self.incoming[:n]
        return n

    def close(self) -> None:
        self.closed = True


class FakeDwmServer:
    """Single-connection dwm IPC server driven by a script.

    Script steps:
        ("recv",)          read one request frame and record it
        ("send", bytes)    write raw bytes
        ("close",)         close the connection
    """

    def __init__(self, socket_path: str, script: List[tuple]):
        self.socket_path = socket_path
        self.script = script
        self.requests: List[Tuple[int, bytes]] = []
        self.error = None
        self._listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._listener.bind(socket_path)
        self._listener.listen(1)
        self._listener.settimeout(10)
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> "FakeDwmServer":
        self._thread.start()
        return self

    def _read_exact(self, conn: socket.socket, size: int) -> bytes:
        data = b""
        while len(data) < size:
            chunk = conn.recv(size - len(data))
            if not chunk:
                raise ConnectionError("client closed connection")
            data += chunk
        return data

    def _serve(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except OSError as e:
            self.error = e
            return
        with conn:
            try:
                for step in self.script:
                    if step[0] == "recv":
                        header = self._read_exact(conn, HEADER_SIZE)
                        size, message_type = struct.unpack("<IB", header[len(MAGIC):])
                        self.requests.append((message_type, self._read_exact(conn, size)))
                    elif step[0] == "send":
                        conn.sendall(step[1])
                    elif step[0] == "close":
                        break
            except OSError as e:
                self.error = e

    def stop(self) -> None:
        self._thread.join(timeout=5)
        self._listener.close()


@pytest.fixture
def socket_dir() -> Generator[Path, None, None]:
    """Short temporary directory so socket paths stay within sun_path."""
    path = tempfile.mkdtemp(prefix="dwm-")
    yield Path(path)
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def socket_path(socket_dir: Path) -> str:
    return os.path.join(socket_dir, "dwm.sock")


@pytest.fixture
def dwm_server(socket_path: str):
    """Factory starting a FakeDwmServer with the given script."""
    servers: List[FakeDwmServer] = []

    def start(script: List[tuple]) -> FakeDwmServer:
        server = FakeDwmServer(socket_path, script).start()
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.stop()


@pytest.fixture
def ack_frame() -> bytes:
    return make_frame(MessageType.RUN_COMMAND, b'{"result":"success"}')
