"""High-level dwm IPC client.

Ties the builders, the codec and the reply consumer to one connection.
Requests are strictly sequential: each one is fully written before its
reply is read.

Usage:
    config = ClientConfig(socket_path=Path("/tmp/dwm.sock"))
    with DwmClient.open(config, sys.stdout.buffer) as client:
        client.run_command("view", ["2"])
"""

from typing import BinaryIO, Iterable, NoReturn, Sequence

from . import builder
from .builder import Request
from .codec import encode
from .logging_config import get_logger, log_ipc_message
from .models import ClientConfig, Frame, MessageType
from .reply import consume_and_discard, consume_and_print, monitor_loop
from .transport import Transport


logger = get_logger('client')


class DwmClient:
    """Synchronous client owning one dwm IPC connection."""

    def __init__(self, transport: Transport, config: ClientConfig, output: BinaryIO):
        """
        Initialize client.

        Args:
            transport: Connected transport, owned by the client from now on
            config: Session settings
            output: Binary stream replies are printed to
        """
        self.transport = transport
        self.config = config
        self.output = output

    @classmethod
    def open(cls, config: ClientConfig, output: BinaryIO) -> "DwmClient":
        """Connect to the socket named in ``config``.

        Raises:
            IPCConnectionError: If the socket cannot be reached
        """
        return cls(Transport.connect(config.socket_path), config, output)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "DwmClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # Framing
    # =========================================================================

    def send(self, request: Request) -> None:
        """Frame and write one request."""
        if not request.message_type.is_request:
            raise ValueError(f"{request.message_type.name} frames are never sent by clients")
        self.transport.write_all(encode(request.message_type, request.payload))
        log_ipc_message("sent", request.message_type.name, request.payload, logger)

    def _print_reply(self) -> Frame:
        return consume_and_print(self.transport, self.output)

    def _acknowledge(self) -> Frame:
        """Consume a reply that may be suppressed by ignore_reply."""
        if self.config.ignore_reply:
            return consume_and_discard(self.transport)
        return self._print_reply()

    # =========================================================================
    # Requests
    # =========================================================================

    def run_command(self, name: str, args: Sequence[str] = ()) -> Frame:
        """Run a dwm IPC command such as ``view`` or ``togglefloating``."""
        self.send(builder.run_command(name, args))
        return self._acknowledge()

    def get_monitors(self) -> Frame:
        self.send(builder.get_monitors())
        return self._print_reply()

    def get_tags(self) -> Frame:
        self.send(builder.get_tags())
        return self._print_reply()

    def get_layouts(self) -> Frame:
        self.send(builder.get_layouts())
        return self._print_reply()

    def get_dwm_client(self, window_id: int) -> Frame:
        """Print the properties of the dwm client managing ``window_id``."""
        self.send(builder.get_dwm_client(window_id))
        return self._print_reply()

    def subscribe(self, events: Iterable[str]) -> None:
        """Subscribe to each event in turn, consuming one acknowledgement per event."""
        for event in events:
            logger.info(f"Subscribing to {event}")
            self.send(builder.subscribe(event))
            self._acknowledge()

    def query(self, message_type: MessageType) -> Frame:
        """Send an argument-less query selected by type."""
        self.send(builder.query(message_type))
        return self._print_reply()

    # =========================================================================
    # Events
    # =========================================================================

    def next_event(self) -> Frame:
        """Print the next frame the server pushes."""
        return self._print_reply()

    def monitor(self) -> NoReturn:
        """Print events until the connection fails."""
        monitor_loop(self.transport, self.output)
