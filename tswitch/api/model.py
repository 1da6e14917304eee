"""Observed-state records and per-resource lifecycle tracking."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tswitch.errors import TeraswitchError

from .spec import ResourceSpec

type RemoteId = int | str


@dataclass(frozen=True, slots=True)
class ComputeInstanceState:
    id: int
    status: str | None = None
    project_id: int | None = None
    region_id: str | None = None
    tier_id: str | None = None
    image_id: str | None = None
    display_name: str | None = None
    power_state: str | None = None
    ip_addresses: tuple[str, ...] | None = None
    tags: tuple[str, ...] = ()
    created: str | None = None


@dataclass(frozen=True, slots=True)
class MetalState:
    """Everything the API reports about a metal service."""

    id: int
    status: str | None = None
    project_id: int | None = None
    region_id: str | None = None
    display_name: str | None = None
    tier_id: str | None = None
    image_id: str | None = None
    power_state: str | None = None
    current_task: str | None = None
    ip_addresses: tuple[str, ...] | None = None
    ipv4_default_gateway: str | None = None
    ipv6_default_gateway: str | None = None
    memory_gb: int | None = None
    tags: tuple[str, ...] | None = None
    reserve_pricing: bool | None = None
    active_date: str | None = None
    termination_date: str | None = None
    monthly_price: float | None = None
    hourly_price: float | None = None
    created: str | None = None


@dataclass(frozen=True, slots=True)
class NetworkState:
    id: str
    region_id: str | None = None
    display_name: str | None = None
    v4_subnet: str | None = None
    v4_subnet_mask: str | None = None
    status: str | None = None


@dataclass(frozen=True, slots=True)
class VolumeState:
    id: str
    status: str | None = None
    region_id: str | None = None
    display_name: str | None = None
    volume_type: str | None = None
    size: int | None = None
    description: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


type ObservedState = ComputeInstanceState | MetalState | NetworkState | VolumeState


# =============================================================================
# Lifecycle
# =============================================================================


class Phase(Enum):
    UNPLANNED = "unplanned"
    CREATING = "creating"
    POLLING = "polling"
    READY = "ready"
    UPDATING = "updating"
    DELETING = "deleting"
    DELETED = "deleted"
    FAILED = "failed"


@dataclass
class Tracked[D: ResourceSpec, O: ObservedState]:
    """One declared resource and what is known about its remote twin.

    ``identifier`` is None until a create succeeds and is cleared again once
    a delete succeeds. While it is set the remote resource must be assumed to
    exist.
    """

    desired: D
    identifier: RemoteId | None = None
    observed: O | None = None
    phase: Phase = Phase.UNPLANNED
    error: TeraswitchError | None = None

    @property
    def kind(self) -> str:
        return self.desired.kind

    @property
    def created(self) -> bool:
        return self.identifier is not None


__all__ = [
    "ComputeInstanceState",
    "MetalState",
    "NetworkState",
    "ObservedState",
    "Phase",
    "RemoteId",
    "Tracked",
    "VolumeState",
]
