"""Message models for the mediator stdio channel."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

REQUEST = "request"
RESPONSE = "response"
EVENT = "event"

MESSAGE_TYPES = frozenset({REQUEST, RESPONSE, EVENT})


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True)
class BridgeMessage:
    """One line-delimited frame exchanged with the mediator."""

    id: str | None
    type: str
    method: str | None = None
    data: Any = None
    error: str | None = None
    timestamp: str = field(default_factory=utc_timestamp)

    @property
    def is_response(self) -> bool:
        return self.type == RESPONSE

    @property
    def is_event(self) -> bool:
        return self.type == EVENT
