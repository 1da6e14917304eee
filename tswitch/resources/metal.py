"""Bare-metal servers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from tswitch.api.model import MetalState, RemoteId
from tswitch.api.spec import MetalSpec, Partition, RaidArray

from .base import as_tuple, compact, power_command
from .types import CreateMetalRequest, MetalServiceResponse, PartitionPayload, RaidArrayPayload

if TYPE_CHECKING:
    from tswitch.client import TeraswitchClient


def _partition(part: Partition) -> PartitionPayload:
    return PartitionPayload(**compact({
        "name": part.name,
        "device": part.device,
        "fileSystem": part.file_system,
        "mountPoint": part.mount_point,
        "sizeBytes": part.size_bytes,
    }))


def _raid_array(raid: RaidArray) -> RaidArrayPayload:
    return RaidArrayPayload(**compact({
        "name": raid.name,
        "type": raid.type,
        "members": list(raid.members),
        "fileSystem": raid.file_system,
        "mountPoint": raid.mount_point,
        "sizeBytes": raid.size_bytes,
    }))


def metal_request(spec: MetalSpec, project_id: int | None) -> CreateMetalRequest:
    body = compact({
        "regionId": spec.region_id,
        "tierId": spec.tier_id,
        "quantity": 1,
        "projectId": project_id,
        "displayName": spec.display_name,
        "imageId": spec.image_id,
        "sshKeyIds": list(spec.ssh_key_ids),
        "password": spec.password,
        "userData": spec.user_data,
        "tags": list(spec.tags),
        "memoryGb": spec.memory_gb,
        "disks": dict(spec.disks),
        "partitions": [_partition(p) for p in spec.partitions],
        "raidArrays": [_raid_array(r) for r in spec.raid_arrays],
        "ipxeUrl": spec.ipxe_url,
        "templateId": spec.template_id,
        "reservePricing": spec.reserve_pricing,
    })
    return CreateMetalRequest(**body)


def metal_state(data: MetalServiceResponse) -> MetalState:
    return MetalState(
        id=data["id"],
        status=data.get("status"),
        project_id=data.get("projectId"),
        region_id=data.get("regionId"),
        display_name=data.get("displayName"),
        tier_id=data.get("tierId"),
        image_id=data.get("imageId"),
        power_state=data.get("powerState"),
        current_task=data.get("currentTask"),
        ip_addresses=as_tuple(data.get("ipAddresses")),
        ipv4_default_gateway=data.get("ipv4DefaultGateway"),
        ipv6_default_gateway=data.get("ipv6DefaultGateway"),
        memory_gb=data.get("memoryGb"),
        tags=as_tuple(data.get("tags")),
        reserve_pricing=data.get("reservePricing"),
        active_date=data.get("activeDate"),
        termination_date=data.get("terminationDate"),
        monthly_price=data.get("monthlyPrice"),
        hourly_price=data.get("hourlyPrice"),
        created=data.get("created"),
    )


class MetalHandler:
    kind = "metal"

    def __init__(self, client: TeraswitchClient) -> None:
        self._client = client
        self._log = logger.bind(resource="metal")

    def wants_ready(self, spec: MetalSpec) -> bool:
        return spec.wait_for_ready

    def status_of(self, state: MetalState) -> str | None:
        return state.status

    async def create(self, spec: MetalSpec) -> MetalState:
        project_id = self._client.config.project_for(spec.project_id)
        data = await self._client.create_metal(metal_request(spec, project_id))
        state = metal_state(data)
        self._log.info("Created metal {id} ({tier})", id=state.id, tier=spec.tier_id)
        return state

    async def read(self, spec: MetalSpec, identifier: RemoteId) -> MetalState:
        return metal_state(await self._client.get_metal(int(identifier)))

    async def lookup(self, identifier: RemoteId) -> MetalState:
        return metal_state(await self._client.get_metal(int(identifier)))

    async def update(self, identifier: RemoteId, old: MetalSpec, new: MetalSpec) -> None:
        metal_id = int(identifier)

        # Clearing the name is not a rename; the server keeps its last one.
        if new.display_name != old.display_name and new.display_name is not None:
            self._log.info(
                "Metal {id} rename {old!r} -> {new!r}",
                id=metal_id, old=old.display_name, new=new.display_name,
            )
            await self._client.rename_metal(metal_id, new.display_name)

        if new.desired_power_state != old.desired_power_state:
            self._log.info(
                "Metal {id} power {old} -> {new}",
                id=metal_id, old=old.desired_power_state, new=new.desired_power_state,
            )
            await self._client.metal_power_command(metal_id, power_command(new.desired_power_state))

    async def delete(self, spec: MetalSpec, identifier: RemoteId) -> None:
        project_id = self._client.config.project_for(spec.project_id)
        await self._client.delete_metal(int(identifier), project_id)
        self._log.info("Deleted metal {id}", id=identifier)


__all__ = ["MetalHandler", "metal_request", "metal_state"]
