"""Field-level checks run on a desired state before it is translated.

Defaults live on the desired-state dataclasses themselves; this pass only reports
what is wrong, as a list of ``FieldError`` rather than raising on the first
problem.
"""

from __future__ import annotations

import ipaddress

from tswitch.api.spec import (
    FILE_SYSTEMS,
    POWER_STATES,
    RAID_TYPES,
    ComputeInstanceSpec,
    MetalSpec,
    NetworkSpec,
    ResourceSpec,
    VolumeSpec,
)
from tswitch.errors import FieldError, ValidationFailed


def _text(path: str, value: object) -> list[FieldError]:
    if not isinstance(value, str):
        return [FieldError(path, f"must be a string, got {type(value).__name__}")]
    if not value:
        return [FieldError(path, "must not be empty")]
    return []


def _required(spec: ResourceSpec, *names: str) -> list[FieldError]:
    return [e for name in names for e in _text(name, getattr(spec, name))]


def _positive(path: str, value: object) -> list[FieldError]:
    if value is None:
        return []
    if not isinstance(value, int) or isinstance(value, bool):
        return [FieldError(path, f"must be an integer, got {type(value).__name__}")]
    if value <= 0:
        return [FieldError(path, f"must be positive, got {value}")]
    return []


def _one_of(path: str, value: object, allowed: frozenset[str]) -> list[FieldError]:
    if not isinstance(value, str) or value not in allowed:
        return [FieldError(path, f"must be one of {', '.join(sorted(allowed))}, got {value!r}")]
    return []


def _credentials(spec: ComputeInstanceSpec | MetalSpec) -> list[FieldError]:
    errors = [
        FieldError(f"ssh_key_ids[{i}]", f"must be an integer, got {type(key).__name__}")
        for i, key in enumerate(spec.ssh_key_ids)
        if not isinstance(key, int) or isinstance(key, bool)
    ]
    if spec.password is not None:
        errors += _text("password", spec.password)
    if not spec.ssh_key_ids and not spec.password:
        errors.append(FieldError("ssh_key_ids", "at least one of ssh_key_ids or password is required"))
    return errors


def _validate_compute(spec: ComputeInstanceSpec) -> list[FieldError]:
    return [
        *_required(spec, "region_id", "tier_id", "display_name"),
        *_positive("boot_size", spec.boot_size),
        *_credentials(spec),
        *_one_of("desired_power_state", spec.desired_power_state, POWER_STATES),
    ]


def _validate_metal(spec: MetalSpec) -> list[FieldError]:
    errors = [
        *_required(spec, "region_id", "tier_id"),
        *_positive("memory_gb", spec.memory_gb),
        *_one_of("desired_power_state", spec.desired_power_state, POWER_STATES),
    ]
    # A template carries its own keys and image.
    if spec.template_id is None:
        errors += _credentials(spec)

    for i, part in enumerate(spec.partitions):
        path = f"partitions[{i}]"
        for name in ("name", "device", "mount_point"):
            errors += _text(f"{path}.{name}", getattr(part, name))
        errors += _one_of(f"{path}.file_system", part.file_system, FILE_SYSTEMS)
        errors += _positive(f"{path}.size_bytes", part.size_bytes)

    for i, raid in enumerate(spec.raid_arrays):
        path = f"raid_arrays[{i}]"
        for name in ("name", "mount_point"):
            errors += _text(f"{path}.{name}", getattr(raid, name))
        if not raid.members:
            errors.append(FieldError(f"{path}.members", "must not be empty"))
        for j, member in enumerate(raid.members):
            errors += _text(f"{path}.members[{j}]", member)
        errors += _one_of(f"{path}.type", raid.type, RAID_TYPES)
        errors += _one_of(f"{path}.file_system", raid.file_system, FILE_SYSTEMS)
        errors += _positive(f"{path}.size_bytes", raid.size_bytes)

    for name, size in spec.disks:
        if not name or not size:
            errors.append(FieldError(f"disks[{name!r}]", "disk name and size must not be empty"))

    return errors


def _validate_network(spec: NetworkSpec) -> list[FieldError]:
    errors = _required(spec, "region_id", "v4_subnet", "v4_subnet_mask")
    if isinstance(spec.v4_subnet, str) and spec.v4_subnet:
        try:
            ipaddress.IPv4Address(spec.v4_subnet)
        except ValueError:
            errors.append(FieldError("v4_subnet", f"not an IPv4 address: {spec.v4_subnet!r}"))
    if isinstance(spec.v4_subnet_mask, str) and spec.v4_subnet_mask:
        try:
            ipaddress.IPv4Network(f"0.0.0.0/{spec.v4_subnet_mask}")
        except ValueError:
            errors.append(FieldError("v4_subnet_mask", f"not an IPv4 netmask: {spec.v4_subnet_mask!r}"))
    return errors


def _validate_volume(spec: VolumeSpec) -> list[FieldError]:
    return [
        *_required(spec, "region_id", "display_name", "volume_type"),
        *_positive("size", spec.size),
    ]


def validate(spec: ResourceSpec) -> list[FieldError]:
    """Return every problem found in ``spec``; empty when it is valid."""
    match spec:
        case ComputeInstanceSpec():
            return _validate_compute(spec)
        case MetalSpec():
            return _validate_metal(spec)
        case NetworkSpec():
            return _validate_network(spec)
        case VolumeSpec():
            return _validate_volume(spec)
        case _:
            raise TypeError(f"Not a resource spec: {type(spec).__name__}")


def ensure_valid(spec: ResourceSpec) -> None:
    """Raise ``ValidationFailed`` listing every error in ``spec``."""
    errors = validate(spec)
    if errors:
        raise ValidationFailed(spec.kind, errors)


__all__ = ["ensure_valid", "validate"]
