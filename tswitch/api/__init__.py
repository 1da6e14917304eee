"""Public data model: desired-state specs and observed-state records."""

from .model import (
    ComputeInstanceState,
    MetalState,
    NetworkState,
    ObservedState,
    Phase,
    RemoteId,
    Tracked,
    VolumeState,
)
from .spec import (
    ComputeInstanceSpec,
    MetalSpec,
    NetworkSpec,
    Partition,
    RaidArray,
    ResourceSpec,
    VolumeSpec,
    spec_from_mapping,
)

__all__ = [
    "ComputeInstanceSpec",
    "ComputeInstanceState",
    "MetalSpec",
    "MetalState",
    "NetworkSpec",
    "NetworkState",
    "ObservedState",
    "Partition",
    "Phase",
    "RaidArray",
    "RemoteId",
    "ResourceSpec",
    "Tracked",
    "VolumeSpec",
    "VolumeState",
    "spec_from_mapping",
]
