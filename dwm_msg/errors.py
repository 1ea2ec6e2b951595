"""
Error types for the dwm IPC client.

Every failure the client can surface derives from DwmIpcError and carries an
ErrorCode, so the CLI can map it to a diagnostic and an exit status.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """
    Error codes for dwm-msg.

    - 100-199: Connection errors
    - 200-299: Stream I/O errors
    - 300-399: Protocol errors
    """

    # Connection errors (100-199)
    SOCKET_PATH_TOO_LONG = 100
    SOCKET_NOT_FOUND = 101
    CONNECTION_REFUSED = 102
    CONNECT_FAILED = 103

    # Stream I/O errors (200-299)
    EOF_IN_HEADER = 200
    EOF_IN_PAYLOAD = 201
    READ_FAILED = 202
    WRITE_FAILED = 203

    # Protocol errors (300-399)
    INVALID_MAGIC = 300
    TRUNCATED_HEADER = 301
    UNKNOWN_MESSAGE_TYPE = 302


class IOPhase(str, Enum):
    """Which part of a frame was being transferred when the stream failed."""
    HEADER = "header"
    PAYLOAD = "payload"
    WRITE = "write"


class DwmIpcError(Exception):
    """Base exception for dwm IPC failures."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize IPC error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a dictionary for structured logging."""
        result = {
            "code": self.code.value,
            "message": self.message
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.context:
            result["context"] = self.context
        return result


class IPCConnectionError(DwmIpcError):
    """The stream to the window manager could not be established."""

    def __init__(self, code: ErrorCode, socket_path: str, reason: str):
        super().__init__(
            code=code,
            message=f"Failed to connect to socket {socket_path}: {reason}",
            suggestion="Check that dwm is running with the IPC patch and that the socket path is correct",
            context={"socket_path": socket_path}
        )
        self.socket_path = socket_path


class IPCIOError(DwmIpcError):
    """A read or write on the established stream could not complete.

    ``phase`` tells a connection dropped mid-header apart from one dropped
    mid-payload; ``received`` and ``expected`` are byte counts for the
    transfer that failed.
    """

    def __init__(
        self,
        phase: IOPhase,
        received: int,
        expected: int,
        reason: Optional[str] = None
    ):
        if reason is None:
            code = ErrorCode.EOF_IN_HEADER if phase is IOPhase.HEADER else ErrorCode.EOF_IN_PAYLOAD
            message = (
                f"Unexpectedly reached EOF while reading {phase.value}. "
                f"Read {received} bytes, expected {expected} bytes."
            )
        else:
            code = ErrorCode.WRITE_FAILED if phase is IOPhase.WRITE else ErrorCode.READ_FAILED
            verb = "writing request" if phase is IOPhase.WRITE else f"reading {phase.value}"
            message = f"Error {verb} after {received} of {expected} bytes: {reason}"

        super().__init__(
            code=code,
            message=message,
            suggestion="The connection might have been lost",
            context={"phase": phase.value, "received": received, "expected": expected}
        )
        self.phase = phase
        self.received = received
        self.expected = expected

    @property
    def is_eof(self) -> bool:
        return self.code in (ErrorCode.EOF_IN_HEADER, ErrorCode.EOF_IN_PAYLOAD)


class ProtocolError(DwmIpcError):
    """A received header does not follow the dwm IPC framing."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_MAGIC):
        super().__init__(
            code=code,
            message=message,
            suggestion="The peer is not a compatible dwm IPC server or the stream is out of sync"
        )


class UnknownMessageTypeError(ProtocolError):
    """A received header carries a message type this client does not know."""

    def __init__(self, value: int):
        super().__init__(
            f"Unknown message type {value} in reply header",
            code=ErrorCode.UNKNOWN_MESSAGE_TYPE
        )
        self.value = value
