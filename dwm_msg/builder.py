"""Request payload construction.

Each builder returns a Request holding the message type and the exact
payload bytes to frame. JSON documents are serialized compactly with raw
UTF-8 text, matching what dwm's own clients send:

    run_command    {"command": <name>, "args": [<int|float|string>, ...]}
    get_dwm_client {"client_window_id": <int>}
    subscribe      {"event": <name>, "action": "subscribe"}

The bare queries (monitors, tags, layouts) carry a single placeholder byte.
"""

import json
from typing import Any, Dict, Iterable

from pydantic import BaseModel, Field

from .classifier import INT64_MAX, convert
from .models import MessageType


# An empty payload is not accepted by the server; queries send one NUL byte
PLACEHOLDER_PAYLOAD = b"\x00"


class Request(BaseModel):
    """An outbound message ready for framing."""

    model_config = {"frozen": True}

    message_type: MessageType
    payload: bytes = Field(..., min_length=1)


def encode_document(document: Dict[str, Any]) -> bytes:
    """Serialize a JSON object the way it goes on the wire.

    Arguments that were not valid UTF-8 on the command line reach us as
    surrogate escapes; ``surrogateescape`` restores their original bytes.
    """
    text = json.dumps(document, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return text.encode("utf-8", errors="surrogateescape")


def run_command(name: str, args: Iterable[str] = ()) -> Request:
    """Build a run_command request; numeric-looking args are sent as numbers."""
    document = {
        "command": name,
        "args": [convert(arg) for arg in args],
    }
    return Request(message_type=MessageType.RUN_COMMAND, payload=encode_document(document))


def get_dwm_client(window_id: int) -> Request:
    """Build a request for the properties of the client owning ``window_id``.

    Ids past the signed 64-bit range are clamped to its maximum, like ``atol``.
    """
    if window_id < 0:
        raise ValueError(f"Window id must be non-negative, got {window_id}")
    document = {"client_window_id": min(int(window_id), INT64_MAX)}
    return Request(message_type=MessageType.GET_DWM_CLIENT, payload=encode_document(document))


def subscribe(event: str) -> Request:
    """Build a subscription request for one event name."""
    document = {
        "event": event,
        "action": "subscribe",
    }
    return Request(message_type=MessageType.SUBSCRIBE, payload=encode_document(document))


def query(message_type: MessageType) -> Request:
    """Build one of the argument-less queries."""
    if message_type not in (MessageType.GET_MONITORS, MessageType.GET_TAGS, MessageType.GET_LAYOUTS):
        raise ValueError(f"{message_type.name} is not an argument-less query")
    return Request(message_type=message_type, payload=PLACEHOLDER_PAYLOAD)


def get_monitors() -> Request:
    return query(MessageType.GET_MONITORS)


def get_tags() -> Request:
    return query(MessageType.GET_TAGS)


def get_layouts() -> Request:
    return query(MessageType.GET_LAYOUTS)
