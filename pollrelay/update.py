"""Module to define the update dataclass."""

from dataclasses import dataclass
from typing import Any


@dataclass
class Update:
    """A single update received from the source, with the payload exactly as received."""

    update_id: int
    payload: dict[str, Any]

    def summary(self) -> str | None:
        """Describe a text message for logging. Return None for any other kind of update."""
        message = self.payload.get("message")
        if not isinstance(message, dict) or not message.get("text"):
            return None
        sender = (message.get("from") or {}).get("first_name") or "Unknown"
        chat_id = (message.get("chat") or {}).get("id")
        return f'Message from {sender} (chat:{chat_id}): "{message["text"]}"'
