"""Desired-state records, one per resource kind.

These are what callers declare. They are immutable; an update is expressed by
building a new record (``dataclasses.replace``) and handing it to the
orchestrator, which diffs it against the previous one.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Literal, get_args

from tswitch.errors import ConfigError

type PowerState = Literal["On", "Off"]
type FileSystem = Literal[
    "Unknown",
    "Unformatted",
    "Ext2",
    "Ext4",
    "Xfs",
    "Fat32",
    "Vfat",
    "Swap",
    "Ramfs",
    "Tmpfs",
    "Btrfs",
    "Zfsroot",
]
type RaidType = Literal["None", "Raid0", "Raid1", "Unknown"]
type ResourceKind = Literal["compute", "metal", "network", "volume"]

POWER_STATES: frozenset[str] = frozenset(get_args(PowerState.__value__))
FILE_SYSTEMS: frozenset[str] = frozenset(get_args(FileSystem.__value__))
RAID_TYPES: frozenset[str] = frozenset(get_args(RaidType.__value__))


# =============================================================================
# Compute
# =============================================================================


@dataclass(frozen=True, slots=True)
class ComputeInstanceSpec:
    """Cloud compute instance.

    Args:
        region_id: Region to create the instance in (e.g. "PIT1").
        tier_id: Service tier.
        display_name: Display name of the instance.
        boot_size: Boot disk size in GB.
        project_id: Project; defaults to the provider project.
        image_id: OS image.
        ssh_key_ids: SSH keys for root. At least one of these or
            ``password`` is required.
        password: Root password.
        user_data: Cloud-init user data.
        tags: Tags added to the instance.
        desired_power_state: "On" or "Off". Default: "On".
        skip_wait_for_ready: Return right after create instead of waiting
            for the instance to become Active. IP addresses stay unset.
    """

    region_id: str
    tier_id: str
    display_name: str
    boot_size: int
    project_id: int | None = None
    image_id: str | None = None
    ssh_key_ids: tuple[int, ...] = ()
    password: str | None = None
    user_data: str | None = None
    tags: tuple[str, ...] = ()
    desired_power_state: PowerState = "On"
    skip_wait_for_ready: bool = False

    kind = "compute"
    mutable = frozenset({"desired_power_state", "skip_wait_for_ready"})


# =============================================================================
# Metal
# =============================================================================


@dataclass(frozen=True, slots=True)
class Partition:
    name: str
    device: str
    file_system: FileSystem
    mount_point: str
    size_bytes: int | None = None


@dataclass(frozen=True, slots=True)
class RaidArray:
    name: str
    type: RaidType
    members: tuple[str, ...]
    file_system: FileSystem
    mount_point: str
    size_bytes: int | None = None


@dataclass(frozen=True, slots=True)
class MetalSpec:
    """Bare-metal server.

    Args:
        region_id: Region to create the server in.
        tier_id: Server configuration, e.g. "7302p-64g".
        project_id: Project; defaults to the provider project.
        display_name: Display name.
        image_id: OS image.
        ssh_key_ids: SSH keys for root. At least one of these or
            ``password`` is required.
        password: Root password.
        user_data: Cloud-init user data.
        tags: Tags added to the server.
        memory_gb: Memory to allocate, in GB.
        disks: Disk name to size (e.g. {"nvme0n1": "960g"}).
        partitions: Partition layout; a single root partition when empty.
        raid_arrays: RAID arrays over devices or partitions.
        ipxe_url: Script URL for iPXE boot.
        template_id: Template used instead of image, partitions, keys and
            user data.
        reserve_pricing: Reserve for a year at the discounted rate.
        desired_power_state: "On" or "Off". Default: "On".
        wait_for_ready: Wait for the server to become Active on create.
    """

    region_id: str
    tier_id: str
    project_id: int | None = None
    display_name: str | None = None
    image_id: str | None = None
    ssh_key_ids: tuple[int, ...] = ()
    password: str | None = None
    user_data: str | None = None
    tags: tuple[str, ...] = ()
    memory_gb: int | None = None
    disks: tuple[tuple[str, str], ...] = ()
    partitions: tuple[Partition, ...] = ()
    raid_arrays: tuple[RaidArray, ...] = ()
    ipxe_url: str | None = None
    template_id: int | None = None
    reserve_pricing: bool | None = None
    desired_power_state: PowerState = "On"
    wait_for_ready: bool = False

    kind = "metal"
    mutable = frozenset({"display_name", "desired_power_state", "wait_for_ready"})


# =============================================================================
# Network
# =============================================================================


@dataclass(frozen=True, slots=True)
class NetworkSpec:
    region_id: str
    v4_subnet: str
    v4_subnet_mask: str
    display_name: str | None = None

    kind = "network"
    mutable = frozenset()


# =============================================================================
# Volume
# =============================================================================


@dataclass(frozen=True, slots=True)
class VolumeSpec:
    """Block storage volume.

    Args:
        region_id: Region to create the volume in.
        display_name: Display name.
        volume_type: Storage type; "nvme" is the only option today.
        size: Size in GiB.
        description: Free-form description.
        image_name: Image to create the volume from.
    """

    region_id: str
    display_name: str
    volume_type: str
    size: int
    description: str | None = None
    image_name: str | None = None

    kind = "volume"
    mutable = frozenset()


type ResourceSpec = ComputeInstanceSpec | MetalSpec | NetworkSpec | VolumeSpec

SPEC_TYPES: dict[ResourceKind, type] = {
    "compute": ComputeInstanceSpec,
    "metal": MetalSpec,
    "network": NetworkSpec,
    "volume": VolumeSpec,
}


# =============================================================================
# Decoding
# =============================================================================


def _sequence(kind: str, name: str, value: Any) -> tuple[Any, ...]:
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{kind}.{name} must be a list, got {type(value).__name__}")
    return tuple(value)


def _table(kind: str, name: str, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{kind}.{name} must be a table, got {type(value).__name__}")
    return value


def _metal_fields(raw: dict[str, Any]) -> dict[str, Any]:
    raw = dict(raw)
    if "disks" in raw:
        disks = _table("metal", "disks", raw["disks"])
        raw["disks"] = tuple(sorted((str(k), str(v)) for k, v in disks.items()))
    if "partitions" in raw:
        raw["partitions"] = tuple(
            Partition(**_table("metal", f"partitions[{i}]", p))
            for i, p in enumerate(_sequence("metal", "partitions", raw["partitions"]))
        )
    if "raid_arrays" in raw:
        arrays = []
        for i, r in enumerate(_sequence("metal", "raid_arrays", raw["raid_arrays"])):
            r = _table("metal", f"raid_arrays[{i}]", r)
            members = _sequence("metal", f"raid_arrays[{i}].members", r.get("members", ()))
            arrays.append(RaidArray(**{**r, "members": members}))
        raw["raid_arrays"] = tuple(arrays)
    return raw


def spec_from_mapping(kind: str, raw: dict[str, Any]) -> ResourceSpec:
    """Decode a declared attribute mapping (e.g. a TOML table) into a spec.

    Shapes are checked here (lists stay lists, tables stay tables); value
    checks belong to ``tswitch.validation``.
    """
    cls = SPEC_TYPES.get(kind)
    if cls is None:
        raise ConfigError(f"Unknown resource kind '{kind}'. Valid: {', '.join(SPEC_TYPES)}")

    known = {f.name for f in fields(cls)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigError(f"Unknown {kind} attributes: {', '.join(sorted(unknown))}")

    try:
        values = dict(raw)
        for name in ("ssh_key_ids", "tags"):
            if name in values:
                values[name] = _sequence(kind, name, values[name])
        if cls is MetalSpec:
            values = _metal_fields(values)
        return cls(**values)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid {kind} declaration: {e}") from e


__all__ = [
    "FILE_SYSTEMS",
    "POWER_STATES",
    "RAID_TYPES",
    "ComputeInstanceSpec",
    "FileSystem",
    "MetalSpec",
    "NetworkSpec",
    "Partition",
    "PowerState",
    "RaidArray",
    "RaidType",
    "ResourceKind",
    "ResourceSpec",
    "SPEC_TYPES",
    "VolumeSpec",
    "spec_from_mapping",
]
