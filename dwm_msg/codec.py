"""Frame codec for the dwm IPC protocol.

Wire layout of one frame:

    offset 0..6   magic "DWM-IPC"
    offset 7..10  payload size, unsigned 32-bit little-endian
    offset 11     message type, unsigned 8-bit
    offset 12..   payload

The header is always read and validated before any payload byte.
"""

import struct
from typing import TYPE_CHECKING

from .errors import ErrorCode, IOPhase, ProtocolError, UnknownMessageTypeError
from .logging_config import get_logger, log_ipc_message
from .models import Frame, FrameHeader, MessageType

if TYPE_CHECKING:
    from .transport import Transport


logger = get_logger('codec')

MAGIC = b"DWM-IPC"
HEADER_STRUCT = struct.Struct("<7sIB")
HEADER_SIZE = HEADER_STRUCT.size  # 12
MAX_PAYLOAD_SIZE = 0xFFFFFFFF


def encode(message_type: MessageType, payload: bytes) -> bytes:
    """Build the wire frame for ``payload``.

    Raises:
        ValueError: If the payload does not fit the 32-bit size field
    """
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(f"Payload of {len(payload)} bytes exceeds {MAX_PAYLOAD_SIZE} bytes")
    return HEADER_STRUCT.pack(MAGIC, len(payload), int(message_type)) + payload


def decode_header(data: bytes) -> FrameHeader:
    """Parse and validate a frame header.

    Raises:
        ProtocolError: If the magic does not match or the header is truncated
        UnknownMessageTypeError: If the message type is not a known kind
    """
    if data[:len(MAGIC)] != MAGIC:
        shown = bytes(data[:len(MAGIC)]).decode("ascii", errors="replace")
        raise ProtocolError(f"Invalid magic string. Got '{shown}', expected '{MAGIC.decode()}'")
    if len(data) != HEADER_SIZE:
        raise ProtocolError(
            f"Header is {len(data)} bytes, expected {HEADER_SIZE}",
            code=ErrorCode.TRUNCATED_HEADER
        )

    _, payload_size, type_value = HEADER_STRUCT.unpack(data)
    try:
        message_type = MessageType(type_value)
    except ValueError:
        raise UnknownMessageTypeError(type_value) from None
    return FrameHeader(message_type=message_type, payload_size=payload_size)


def read_frame(transport: "Transport") -> Frame:
    """Read one complete frame from ``transport``."""
    header = decode_header(transport.read_exact(HEADER_SIZE, IOPhase.HEADER))
    payload = transport.read_exact(header.payload_size, IOPhase.PAYLOAD)
    log_ipc_message("received", header.message_type.name, payload, logger)
    return Frame(header=header, payload=payload)
