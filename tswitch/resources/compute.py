"""Cloud compute instances."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from tswitch.api.model import ComputeInstanceState, RemoteId
from tswitch.api.spec import ComputeInstanceSpec

from .base import as_tuple, compact, power_command
from .types import CloudServiceResponse, CreateInstanceRequest

if TYPE_CHECKING:
    from tswitch.client import TeraswitchClient


def instance_request(spec: ComputeInstanceSpec, project_id: int | None) -> CreateInstanceRequest:
    body = compact({
        "regionId": spec.region_id,
        "tierId": spec.tier_id,
        "projectId": project_id,
        "imageId": spec.image_id,
        "displayName": spec.display_name,
        "sshKeyIds": list(spec.ssh_key_ids),
        "password": spec.password,
        "bootSize": spec.boot_size,
        "userData": spec.user_data,
        "tags": list(spec.tags),
    })
    return CreateInstanceRequest(**body)


def instance_state(data: CloudServiceResponse) -> ComputeInstanceState:
    return ComputeInstanceState(
        id=data["id"],
        status=data.get("status"),
        project_id=data.get("projectId"),
        region_id=data.get("regionId"),
        tier_id=data.get("tierId"),
        image_id=data.get("imageId"),
        display_name=data.get("displayName"),
        power_state=data.get("powerState"),
        ip_addresses=as_tuple(data.get("ipAddresses")),
        tags=tuple(data.get("tags") or ()),
        created=data.get("created"),
    )


class ComputeHandler:
    kind = "compute"

    def __init__(self, client: TeraswitchClient) -> None:
        self._client = client
        self._log = logger.bind(resource="compute")

    def wants_ready(self, spec: ComputeInstanceSpec) -> bool:
        return not spec.skip_wait_for_ready

    def status_of(self, state: ComputeInstanceState) -> str | None:
        return state.status

    async def create(self, spec: ComputeInstanceSpec) -> ComputeInstanceState:
        project_id = self._client.config.project_for(spec.project_id)
        data = await self._client.create_instance(instance_request(spec, project_id))
        state = instance_state(data)
        self._log.info("Created instance {id} ({name})", id=state.id, name=spec.display_name)
        return state

    async def read(self, spec: ComputeInstanceSpec, identifier: RemoteId) -> ComputeInstanceState:
        return instance_state(await self._client.get_instance(int(identifier)))

    async def update(
        self, identifier: RemoteId, old: ComputeInstanceSpec, new: ComputeInstanceSpec,
    ) -> None:
        if new.desired_power_state != old.desired_power_state:
            self._log.info(
                "Instance {id} power {old} -> {new}",
                id=identifier, old=old.desired_power_state, new=new.desired_power_state,
            )
            await self._client.instance_power_command(
                int(identifier), power_command(new.desired_power_state),
            )

    async def delete(self, spec: ComputeInstanceSpec, identifier: RemoteId) -> None:
        await self._client.delete_instance(int(identifier))
        self._log.info("Deleted instance {id}", id=identifier)


__all__ = ["ComputeHandler", "instance_request", "instance_state"]
