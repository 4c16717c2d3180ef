"""pollrelay module."""

from .client import SourceClient
from .config import Settings, load_settings
from .cursor import LATEST_OFFSET, Cursor
from .cursor_store import CursorStore, FileCursorStore, MemoryCursorStore
from .errors import (
    ConfigurationError,
    CursorStoreError,
    MalformedResponseError,
    RelayError,
    SinkDeliveryError,
    SourceAPIError,
    SourceError,
    SourceTransportError,
)
from .relay import BacklogPolicy, RelayPump, RelayState, UpdateSource
from .sink import UpdateSink, WebhookSink
from .update import Update

__all__ = [
    "LATEST_OFFSET",
    "BacklogPolicy",
    "ConfigurationError",
    "Cursor",
    "CursorStore",
    "CursorStoreError",
    "FileCursorStore",
    "MalformedResponseError",
    "MemoryCursorStore",
    "RelayError",
    "RelayPump",
    "RelayState",
    "Settings",
    "SinkDeliveryError",
    "SourceAPIError",
    "SourceClient",
    "SourceError",
    "SourceTransportError",
    "Update",
    "UpdateSink",
    "UpdateSource",
    "WebhookSink",
    "load_settings",
]
