"""Private networks.

The API has no get-by-id for networks, so reads list the project's networks
and pick the one with a matching id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from tswitch.api.model import NetworkState, RemoteId
from tswitch.api.spec import NetworkSpec
from tswitch.errors import NotFoundError

from .base import compact
from .types import CreateNetworkRequest, NetworkResponse

if TYPE_CHECKING:
    from tswitch.client import TeraswitchClient


def network_request(spec: NetworkSpec) -> CreateNetworkRequest:
    return CreateNetworkRequest(**compact({
        "regionId": spec.region_id,
        "v4Subnet": spec.v4_subnet,
        "v4SubnetMask": spec.v4_subnet_mask,
        "displayName": spec.display_name,
    }))


def network_state(data: NetworkResponse) -> NetworkState:
    return NetworkState(
        id=str(data["id"]),
        region_id=data.get("regionId"),
        display_name=data.get("displayName"),
        v4_subnet=data.get("v4Subnet"),
        v4_subnet_mask=data.get("v4SubnetMask"),
        status=data.get("status"),
    )


class NetworkHandler:
    kind = "network"

    def __init__(self, client: TeraswitchClient) -> None:
        self._client = client
        self._log = logger.bind(resource="network")

    def wants_ready(self, spec: NetworkSpec) -> bool:
        return False

    def status_of(self, state: NetworkState) -> str | None:
        return state.status

    async def create(self, spec: NetworkSpec) -> NetworkState:
        data = await self._client.create_network(
            network_request(spec), self._client.config.project_id,
        )
        state = network_state(data)
        self._log.info("Created network {id} ({subnet}/{mask})",
                       id=state.id, subnet=spec.v4_subnet, mask=spec.v4_subnet_mask)
        return state

    async def read(self, spec: NetworkSpec, identifier: RemoteId) -> NetworkState:
        networks = await self._client.list_networks(self._client.config.project_id)
        for data in networks:
            if str(data.get("id")) == str(identifier):
                return network_state(data)
        raise NotFoundError(f"Network {identifier} not found among {len(networks)} networks")

    async def update(self, identifier: RemoteId, old: NetworkSpec, new: NetworkSpec) -> None:
        return None

    async def delete(self, spec: NetworkSpec, identifier: RemoteId) -> None:
        await self._client.delete_network(str(identifier), self._client.config.project_id)
        self._log.info("Deleted network {id}", id=identifier)


__all__ = ["NetworkHandler", "network_request", "network_state"]
