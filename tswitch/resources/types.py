"""TeraSwitch API payload types.

TypedDicts for request bodies and response results - no conversion needed
on the wire side; translators turn them into spec/state dataclasses.
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict

# =============================================================================
# Envelope
# =============================================================================


class ListMetadata(TypedDict, total=False):
    totalCount: int
    offset: int
    limit: int


class ApiEnvelope(TypedDict):
    """Every response is wrapped in this."""

    success: NotRequired[bool]
    message: NotRequired[str | None]
    result: NotRequired[Any]
    metadata: NotRequired[ListMetadata]


# =============================================================================
# Compute
# =============================================================================


class CreateInstanceRequest(TypedDict):
    regionId: str
    tierId: str
    projectId: NotRequired[int]
    imageId: NotRequired[str]
    displayName: NotRequired[str]
    sshKeyIds: NotRequired[list[int]]
    password: NotRequired[str]
    bootSize: NotRequired[int]
    userData: NotRequired[str]
    tags: NotRequired[list[str]]


class CloudServiceResponse(TypedDict):
    id: int
    projectId: NotRequired[int | None]
    regionId: NotRequired[str | None]
    tierId: NotRequired[str | None]
    imageId: NotRequired[str | None]
    displayName: NotRequired[str | None]
    status: NotRequired[str | None]
    powerState: NotRequired[str | None]
    ipAddresses: NotRequired[list[str] | None]
    tags: NotRequired[list[str] | None]
    created: NotRequired[str | None]


# =============================================================================
# Metal
# =============================================================================


class PartitionPayload(TypedDict):
    name: str
    device: str
    fileSystem: str
    mountPoint: str
    sizeBytes: NotRequired[int]


class RaidArrayPayload(TypedDict):
    name: str
    type: str
    members: list[str]
    fileSystem: str
    mountPoint: str
    sizeBytes: NotRequired[int]


class CreateMetalRequest(TypedDict):
    regionId: str
    tierId: str
    quantity: int
    projectId: NotRequired[int]
    displayName: NotRequired[str]
    imageId: NotRequired[str]
    sshKeyIds: NotRequired[list[int]]
    password: NotRequired[str]
    userData: NotRequired[str]
    tags: NotRequired[list[str]]
    memoryGb: NotRequired[int]
    disks: NotRequired[dict[str, str]]
    partitions: NotRequired[list[PartitionPayload]]
    raidArrays: NotRequired[list[RaidArrayPayload]]
    ipxeUrl: NotRequired[str]
    templateId: NotRequired[int]
    reservePricing: NotRequired[bool]


class MetalServiceResponse(TypedDict):
    id: int
    projectId: NotRequired[int | None]
    regionId: NotRequired[str | None]
    displayName: NotRequired[str | None]
    tierId: NotRequired[str | None]
    imageId: NotRequired[str | None]
    status: NotRequired[str | None]
    powerState: NotRequired[str | None]
    currentTask: NotRequired[str | None]
    ipAddresses: NotRequired[list[str] | None]
    ipv4DefaultGateway: NotRequired[str | None]
    ipv6DefaultGateway: NotRequired[str | None]
    memoryGb: NotRequired[int | None]
    tags: NotRequired[list[str] | None]
    reservePricing: NotRequired[bool | None]
    activeDate: NotRequired[str | None]
    terminationDate: NotRequired[str | None]
    monthlyPrice: NotRequired[float | None]
    hourlyPrice: NotRequired[float | None]
    created: NotRequired[str | None]


# =============================================================================
# Network
# =============================================================================


class CreateNetworkRequest(TypedDict):
    regionId: str
    v4Subnet: str
    v4SubnetMask: str
    displayName: NotRequired[str]


class NetworkResponse(TypedDict):
    id: str
    regionId: NotRequired[str | None]
    displayName: NotRequired[str | None]
    v4Subnet: NotRequired[str | None]
    v4SubnetMask: NotRequired[str | None]
    status: NotRequired[str | None]


# =============================================================================
# Volume
# =============================================================================


class CreateVolumeRequest(TypedDict):
    regionId: str
    displayName: str
    volumeType: str
    size: int
    description: NotRequired[str]
    imageName: NotRequired[str]


class DeleteVolumeRequest(TypedDict):
    regionId: str
    volumeId: str


class VolumeResponse(TypedDict):
    volumeId: str
    region: NotRequired[str | None]
    displayName: NotRequired[str | None]
    volumeType: NotRequired[str | None]
    size: NotRequired[int | str | None]
    description: NotRequired[str | None]
    status: NotRequired[str | None]
    createdAt: NotRequired[str | None]
    updatedAt: NotRequired[str | None]


__all__ = [
    "ApiEnvelope",
    "CloudServiceResponse",
    "CreateInstanceRequest",
    "CreateMetalRequest",
    "CreateNetworkRequest",
    "CreateVolumeRequest",
    "DeleteVolumeRequest",
    "ListMetadata",
    "MetalServiceResponse",
    "NetworkResponse",
    "PartitionPayload",
    "RaidArrayPayload",
    "VolumeResponse",
]
