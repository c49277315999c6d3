"""Local-network session helpers: connection status events and beacon app data.

Application data is 0x14 bytes: a four-byte magic followed by the game
name, NUL padded, in the remaining sixteen bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    "ConnectionEvent",
    "ConnectionTracker",
    "AppDataError",
    "build_app_data",
    "parse_app_data",
    "APP_DATA_MAGIC",
    "APP_DATA_SIZE",
    "DEFAULT_APP_NAME",
    "WLAN_COMM_ID",
    "DATA_CHANNEL",
]

APP_DATA_MAGIC = bytes((0x69, 0x8A, 0x05, 0x5C))
APP_DATA_SIZE = 0x14
DEFAULT_APP_NAME = "Splatoon 3DS"
WLAN_COMM_ID = 0x48424200
DATA_CHANNEL = 1

_NAME_FIELD = APP_DATA_SIZE - len(APP_DATA_MAGIC)

_STATUS_HOST_CLOSED = 3
_STATUS_NODES_CHANGED = 6
_STATUS_JOINED = 9


class AppDataError(ValueError):
    """Raised when application data cannot be built or is invalid."""


class ConnectionEvent(IntEnum):
    """What a connection status change means."""

    UNKNOWN = -1
    NETWORK_CREATED = 1
    JOINED_NETWORK = 2
    CLIENT_CONNECTED = 3
    CLIENT_DISCONNECTED = 4
    HOST_TERMINATED = 5


@dataclass
class ConnectionTracker:
    """Interprets connection status reports, remembering the node count."""

    total_nodes: int = 0

    def parse_status(self, status: int, total_nodes: int) -> ConnectionEvent:
        """Classify a status report and update the known node count."""
        if status == _STATUS_HOST_CLOSED:
            return ConnectionEvent.HOST_TERMINATED
        if status == _STATUS_JOINED:
            return ConnectionEvent.JOINED_NETWORK
        if status != _STATUS_NODES_CHANGED:
            return ConnectionEvent.UNKNOWN
        if self.total_nodes == 0:
            event = ConnectionEvent.NETWORK_CREATED
        elif total_nodes > self.total_nodes:
            event = ConnectionEvent.CLIENT_CONNECTED
        elif total_nodes < self.total_nodes:
            event = ConnectionEvent.CLIENT_DISCONNECTED
        else:
            return ConnectionEvent.UNKNOWN
        self.total_nodes = total_nodes
        return event


def build_app_data(name: str = DEFAULT_APP_NAME) -> bytes:
    """Build the beacon application data for ``name``."""
    raw = name.encode("utf-8")
    if b"\0" in raw:
        raise AppDataError("application name must not contain NUL")
    if len(raw) >= _NAME_FIELD:
        raise AppDataError(f"application name too long: must be less than {_NAME_FIELD} bytes")
    return APP_DATA_MAGIC + raw.ljust(_NAME_FIELD, b"\0")


def parse_app_data(data: bytes) -> str:
    """Validate beacon application data and return the name it carries."""
    if len(data) != APP_DATA_SIZE:
        raise AppDataError(f"application data must be {APP_DATA_SIZE} bytes, got {len(data)}")
    if data[: len(APP_DATA_MAGIC)] != APP_DATA_MAGIC:
        raise AppDataError("the first 4 bytes of application data are invalid")
    name = data[len(APP_DATA_MAGIC) :].split(b"\0", 1)[0]
    return name.decode("utf-8", errors="replace")