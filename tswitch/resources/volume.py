"""Block storage volumes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from tswitch.api.model import RemoteId, VolumeState
from tswitch.api.spec import VolumeSpec
from tswitch.errors import DecodeError, NotFoundError

from .base import compact
from .types import CreateVolumeRequest, DeleteVolumeRequest, VolumeResponse

if TYPE_CHECKING:
    from tswitch.client import TeraswitchClient


def _size(raw: int | str | None) -> int | None:
    # List responses report the size as a string.
    if raw is None or isinstance(raw, int):
        return raw
    try:
        return int(raw)
    except ValueError as e:
        raise DecodeError(f"Volume size is not an integer: {raw!r}") from e


def volume_request(spec: VolumeSpec) -> CreateVolumeRequest:
    return CreateVolumeRequest(**compact({
        "regionId": spec.region_id,
        "displayName": spec.display_name,
        "volumeType": spec.volume_type,
        "size": spec.size,
        "description": spec.description,
        "imageName": spec.image_name,
    }))


def volume_state(data: VolumeResponse) -> VolumeState:
    return VolumeState(
        id=str(data["volumeId"]),
        status=data.get("status"),
        region_id=data.get("region"),
        display_name=data.get("displayName"),
        volume_type=data.get("volumeType"),
        size=_size(data.get("size")),
        description=data.get("description"),
        created_at=data.get("createdAt"),
        updated_at=data.get("updatedAt"),
    )


class VolumeHandler:
    kind = "volume"

    def __init__(self, client: TeraswitchClient) -> None:
        self._client = client
        self._log = logger.bind(resource="volume")

    def wants_ready(self, spec: VolumeSpec) -> bool:
        return False

    def status_of(self, state: VolumeState) -> str | None:
        return state.status

    async def create(self, spec: VolumeSpec) -> VolumeState:
        data = await self._client.create_volume(volume_request(spec), self._client.config.project_id)
        state = volume_state(data)
        self._log.info("Created volume {id} ({size} GiB)", id=state.id, size=spec.size)
        return state

    async def read(self, spec: VolumeSpec, identifier: RemoteId) -> VolumeState:
        volumes = await self._client.list_volumes(self._client.config.project_id)
        for data in volumes:
            if str(data.get("volumeId")) == str(identifier):
                return volume_state(data)
        raise NotFoundError(f"Volume {identifier} not found among {len(volumes)} volumes")

    async def update(self, identifier: RemoteId, old: VolumeSpec, new: VolumeSpec) -> None:
        return None

    async def delete(self, spec: VolumeSpec, identifier: RemoteId) -> None:
        body = DeleteVolumeRequest(regionId=spec.region_id, volumeId=str(identifier))
        await self._client.delete_volume(body, self._client.config.project_id)
        self._log.info("Deleted volume {id}", id=identifier)


__all__ = ["VolumeHandler", "volume_request", "volume_state"]
