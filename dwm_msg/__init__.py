"""dwm-msg - client for the dwm window manager IPC socket.

This package provides:
- Unix socket transport with retrying partial I/O
- DWM-IPC frame encoding and decoding
- Request payload builders with numeric argument detection
- Reply printing and event monitoring
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .client import DwmClient  # noqa: F401
from .codec import HEADER_SIZE, MAGIC, decode_header, encode, read_frame  # noqa: F401
from .errors import (  # noqa: F401
    DwmIpcError,
    ErrorCode,
    IOPhase,
    IPCConnectionError,
    IPCIOError,
    ProtocolError,
    UnknownMessageTypeError,
)
from .models import ClientConfig, Frame, FrameHeader, MessageType  # noqa: F401
from .transport import Transport  # noqa: F401

__all__ = [
    "__version__",
    "DwmClient",
    "ClientConfig",
    "Frame",
    "FrameHeader",
    "MessageType",
    "Transport",
    "HEADER_SIZE",
    "MAGIC",
    "encode",
    "decode_header",
    "read_frame",
    "DwmIpcError",
    "ErrorCode",
    "IOPhase",
    "IPCConnectionError",
    "IPCIOError",
    "ProtocolError",
    "UnknownMessageTypeError",
]
