"""Shared plumbing for resource handlers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from tswitch.api.model import RemoteId
from tswitch.api.spec import PowerState

ACTIVE = "Active"

POWER_COMMANDS: dict[str, str] = {
    "On": "PowerOn",
    "Off": "PowerOff",
}


def power_command(state: PowerState) -> str:
    try:
        return POWER_COMMANDS[state]
    except KeyError:
        raise ValueError(f"Unknown power state: {state!r}") from None


def compact[K](payload: dict[K, Any]) -> dict[K, Any]:
    """Drop unset entries so optional attributes are omitted from the body.

    ``None`` and empty collections are unset; ``False`` and ``0`` are kept.
    """
    return {
        k: v for k, v in payload.items()
        if v is not None and not (isinstance(v, (list, tuple, dict)) and not v)
    }


def as_tuple[T](values: list[T] | None) -> tuple[T, ...] | None:
    return tuple(values) if values is not None else None


@runtime_checkable
class ResourceHandler[D, O](Protocol):
    """CRUD operations for one resource kind.

    Handlers hold only the API client and the provider's default project.
    Lifecycle state lives in the ``Tracked`` record the orchestrator drives.
    """

    kind: str

    def wants_ready(self, spec: D) -> bool:
        """Whether create should poll until the resource reports Active."""
        ...

    def status_of(self, state: O) -> str | None: ...

    async def create(self, spec: D) -> O:
        """Issue the create call and return what the response reports."""
        ...

    async def read(self, spec: D, identifier: RemoteId) -> O: ...

    async def update(self, identifier: RemoteId, old: D, new: D) -> None:
        """Issue one call per changed in-place field."""
        ...

    async def delete(self, spec: D, identifier: RemoteId) -> None: ...


__all__ = [
    "ACTIVE",
    "POWER_COMMANDS",
    "ResourceHandler",
    "as_tuple",
    "compact",
    "power_command",
]
