"""Unix socket transport for the dwm IPC protocol.

Provides blocking, all-or-nothing byte transfer over the stream socket dwm
listens on. Short reads and writes are looped; interrupt-class OS
conditions (EINTR, EAGAIN, EWOULDBLOCK) are retried in place without losing
the bytes already transferred.
"""

import errno
import os
import socket
from pathlib import Path
from typing import Callable, TypeVar, Union

from .errors import ErrorCode, IOPhase, IPCConnectionError, IPCIOError
from .logging_config import get_logger
from .models import SUN_PATH_SIZE


logger = get_logger('transport')

T = TypeVar("T")

TRANSIENT_ERRNOS = frozenset({errno.EINTR, errno.EAGAIN, errno.EWOULDBLOCK})


def is_transient(exc: OSError) -> bool:
    """Return True if the OS error only asks the caller to try again."""
    if isinstance(exc, (InterruptedError, BlockingIOError)):
        return True
    return exc.errno in TRANSIENT_ERRNOS


def retry_transient(operation: Callable[[], T]) -> T:
    """Call ``operation`` until it completes without a transient OS error.

    Any other OSError propagates unchanged.
    """
    while True:
        try:
            return operation()
        except OSError as e:
            if not is_transient(e):
                raise
            logger.debug(f"Retrying after transient condition: {e}")


class Transport:
    """Exclusive owner of one connected stream socket.

    Usage:
        with Transport.connect("/tmp/dwm.sock") as transport:
            transport.write_all(frame)
            header = transport.read_exact(HEADER_SIZE, IOPhase.HEADER)
    """

    def __init__(self, sock: socket.socket):
        """
        Wrap an already connected socket.

        Args:
            sock: Connected stream socket (or any object with send/recv_into/close)
        """
        self._sock = sock

    @classmethod
    def connect(cls, socket_path: Union[str, Path]) -> "Transport":
        """Open a stream connection to the dwm socket.

        Args:
            socket_path: Filesystem path of the Unix socket

        Returns:
            Connected transport

        Raises:
            IPCConnectionError: If the path is too long or the socket is unreachable
        """
        path = os.fspath(socket_path)
        if len(os.fsencode(path)) >= SUN_PATH_SIZE:
            raise IPCConnectionError(
                ErrorCode.SOCKET_PATH_TOO_LONG,
                path,
                f"path exceeds {SUN_PATH_SIZE - 1} bytes"
            )

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            logger.debug(f"Connecting to {path}")
            sock.connect(path)
        except FileNotFoundError as e:
            sock.close()
            raise IPCConnectionError(ErrorCode.SOCKET_NOT_FOUND, path, e.strerror or str(e)) from e
        except ConnectionRefusedError as e:
            sock.close()
            raise IPCConnectionError(ErrorCode.CONNECTION_REFUSED, path, e.strerror or str(e)) from e
        except OSError as e:
            sock.close()
            raise IPCConnectionError(ErrorCode.CONNECT_FAILED, path, e.strerror or str(e)) from e

        logger.info(f"Connected to dwm at {path}")
        return cls(sock)

    def write_all(self, data: bytes) -> None:
        """Write every byte of ``data``.

        Raises:
            IPCIOError: If the socket reports a non-transient error
        """
        view = memoryview(data)
        total = len(view)
        written = 0
        while written < total:
            remaining = view[written:]
            try:
                n = retry_transient(lambda: self._sock.send(remaining))
            except OSError as e:
                raise IPCIOError(IOPhase.WRITE, written, total, reason=str(e)) from e
            written += n

    def read_exact(self, size: int, phase: IOPhase = IOPhase.PAYLOAD) -> bytes:
        """Read exactly ``size`` bytes.

        Args:
            size: Number of bytes to read
            phase: Frame part being read, reported if the stream ends early

        Raises:
            IPCIOError: If the peer closes the stream or the read fails
        """
        buffer = bytearray(size)
        view = memoryview(buffer)
        received = 0
        while received < size:
            remaining = view[received:]
            try:
                n = retry_transient(lambda: self._sock.recv_into(remaining))
            except OSError as e:
                raise IPCIOError(phase, received, size, reason=str(e)) from e
            if n == 0:
                raise IPCIOError(phase, received, size)
            received += n
        return bytes(buffer)

    def close(self) -> None:
        """Close the underlying socket."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
            logger.debug("Connection closed")

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
