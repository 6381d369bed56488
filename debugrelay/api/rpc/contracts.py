"""Transport-neutral call contracts shared by the envelope and the router."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Protocol(str, Enum):
    """Which envelope shape the caller used."""

    LEGACY = "legacy"
    JSONRPC2 = "jsonrpc2"


RequestId = str | int | float | None


@dataclass(frozen=True, slots=True)
class Call:
    """One decoded inbound request, built once per line."""

    method: str
    raw_params: str = "{}"
    protocol: Protocol = Protocol.LEGACY
    id: RequestId = None
    has_id: bool = False


@dataclass(slots=True)
class CallResult:
    """Successful handler outcome."""

    success: bool = True
    payload: Any = None
    message: str | None = None


@dataclass(slots=True)
class CallError:
    """Failed handler outcome carrying a stable domain code."""

    domain_code: str
    message: str
    details: Any = None


CallOutcome = CallResult | CallError
