"""Reply consumption.

Replies are passed through untouched: the payload is written to the output
stream followed by a newline. Reading a frame fully, even one that is
discarded, keeps the stream positioned at the next frame boundary.
"""

from typing import BinaryIO, NoReturn

from .codec import read_frame
from .logging_config import get_logger
from .models import Frame
from .transport import Transport


logger = get_logger('reply')


def consume_and_print(transport: Transport, output: BinaryIO) -> Frame:
    """Read one frame and write its payload and a newline to ``output``."""
    frame = read_frame(transport)
    output.write(frame.payload + b"\n")
    output.flush()
    return frame


def consume_and_discard(transport: Transport) -> Frame:
    """Read one frame without producing output."""
    frame = read_frame(transport)
    logger.debug(f"Discarded {frame.message_type.name} reply ({len(frame.payload)} bytes)")
    return frame


def monitor_loop(transport: Transport, output: BinaryIO) -> NoReturn:
    """Print frames forever.

    Only returns by raising: a dropped connection or a malformed header
    propagates to the caller.
    """
    logger.info("Monitoring events")
    while True:
        consume_and_print(transport, output)
