"""Tool registry: the explicit method table built once at startup.

The router resolves every inbound method through this table. Disabled
registrations stay known so callers can tell "switched off here" apart from
"never heard of it".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from debugrelay.utils.exceptions import DuplicateMethodError, RegistryFrozenError

Handler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ToolRegistration:
    """Binding of one method name to a typed request and an async handler."""

    method: str
    request_type: type[BaseModel]
    handler: Handler
    description: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)
    enabled: bool = True


class ToolRegistry:
    """
    Registry of debug tools keyed by method name.

    Registration order is preserved. The registry is frozen before serving;
    after that it is read-only.
    """

    def __init__(self):
        self._tools: dict[str, ToolRegistration] = {}
        self._frozen = False

    def register(self, registration: ToolRegistration) -> None:
        """Register a tool; duplicate names fail fast."""
        if self._frozen:
            raise RegistryFrozenError(registration.method)
        if registration.method in self._tools:
            raise DuplicateMethodError(registration.method)
        self._tools[registration.method] = registration

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, method: str) -> ToolRegistration | None:
        """Get a registration by method name, enabled or not."""
        return self._tools.get(method)

    def methods(self, *, include_disabled: bool = False) -> list[str]:
        """List method names in registration order."""
        return [m for m, reg in self._tools.items() if include_disabled or reg.enabled]

    def registrations(self) -> list[ToolRegistration]:
        return list(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, method: str) -> bool:
        return method in self._tools
