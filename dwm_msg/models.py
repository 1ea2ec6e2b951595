"""
Pydantic data models for the dwm IPC protocol.

Defines the message type enumeration, the frame header record, received
frames and the client configuration.
"""

from enum import IntEnum
from pathlib import Path
from typing import Tuple

from pydantic import BaseModel, Field, field_validator


DEFAULT_SOCKET_PATH = Path("/tmp/dwm.sock")

# sizeof(sockaddr_un.sun_path) on Linux, including the NUL terminator
SUN_PATH_SIZE = 108

# Events the server publishes; the set is open, these only feed help and completion
KNOWN_EVENTS: Tuple[str, ...] = (
    "tag_change_event",
    "client_focus_change_event",
    "layout_change_event",
    "monitor_focus_change_event",
    "focused_title_change_event",
    "focused_state_change_event",
)


# Enumerations

class MessageType(IntEnum):
    """Message kinds with their wire values."""
    RUN_COMMAND = 0
    GET_MONITORS = 1
    GET_TAGS = 2
    GET_LAYOUTS = 3
    GET_DWM_CLIENT = 4
    SUBSCRIBE = 5
    EVENT = 6

    @property
    def is_request(self) -> bool:
        """Event frames only ever travel from the server to the client."""
        return self is not MessageType.EVENT


# Core Entities

class FrameHeader(BaseModel):
    """Fixed-size record that precedes every payload."""

    model_config = {"frozen": True}

    message_type: MessageType = Field(..., description="Kind of message the frame carries")
    payload_size: int = Field(..., ge=0, le=0xFFFFFFFF, description="Payload length in bytes")


class Frame(BaseModel):
    """One complete header-plus-payload unit read from the connection."""

    model_config = {"frozen": True}

    header: FrameHeader
    payload: bytes = Field(..., description="Raw payload bytes, exactly header.payload_size long")

    @property
    def message_type(self) -> MessageType:
        return self.header.message_type


class ClientConfig(BaseModel):
    """Settings threaded through a client session."""

    socket_path: Path = Field(DEFAULT_SOCKET_PATH, description="Unix socket dwm listens on")
    ignore_reply: bool = Field(False, description="Discard run_command/subscribe acknowledgements")
    monitor: bool = Field(False, description="Keep printing events after subscribing")

    @field_validator('socket_path', mode='before')
    @classmethod
    def validate_socket_path(cls, v):
        """Reject empty paths; length limits are checked when connecting."""
        if not str(v):
            raise ValueError("Socket path must not be empty")
        return v
