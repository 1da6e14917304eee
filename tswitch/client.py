"""Async client for the TeraSwitch API.

One coroutine per endpoint. Responses arrive wrapped in a
``{success, message, result}`` envelope; the client unwraps it and returns
the TypedDict inside.
"""

from __future__ import annotations

from typing import Any, cast

from loguru import logger

from tswitch.config import ProviderConfig
from tswitch.errors import ApiError, ConfigError, DecodeError
from tswitch.infra.http import BearerAuth, HttpClient

from .resources.types import (
    CloudServiceResponse,
    CreateInstanceRequest,
    CreateMetalRequest,
    CreateNetworkRequest,
    CreateVolumeRequest,
    DeleteVolumeRequest,
    MetalServiceResponse,
    NetworkResponse,
    VolumeResponse,
)


def _params(**values: Any) -> dict[str, Any] | None:
    params = {k: v for k, v in values.items() if v is not None}
    return params or None


class TeraswitchClient:
    """Async HTTP client for the TeraSwitch API.

    Example:
        async with TeraswitchClient(ProviderConfig().resolve()) as client:
            metal = await client.get_metal(1234)
    """

    def __init__(self, config: ProviderConfig) -> None:
        if not config.api_key:
            raise ConfigError("TeraswitchClient needs a resolved config with an api_key")
        self._config = config
        self._log = logger.bind(component="client")
        self._http = HttpClient(
            config.base_url,
            BearerAuth(config.api_key),
            timeout=config.request_timeout,
            default_headers={"Content-Type": "application/json"},
        )

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def __aenter__(self) -> TeraswitchClient:
        await self._http.__aenter__()
        return self

    async def __aexit__(self, *_args: object) -> None:
        await self._http.close()

    async def close(self) -> None:
        await self._http.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        expect_result: bool = True,
    ) -> Any:
        data = await self._http.request(method, path, json=json, params=params)

        if data is None:
            if expect_result:
                raise DecodeError(f"{method} {path}: empty response body")
            return None
        if not isinstance(data, dict):
            raise DecodeError(f"{method} {path}: expected a JSON object, got {type(data).__name__}")

        if data.get("success") is False:
            message = data.get("message") or "request was not successful"
            self._log.warning(
                "{method} {path} rejected: {message}",
                method=method, path=path, message=message,
            )
            raise ApiError(status=200, body=message)

        result = data.get("result")
        if result is None and expect_result:
            raise DecodeError(f"{method} {path}: response has no result")
        return result

    async def _one(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        result = await self._request(method, path, **kwargs)
        if not isinstance(result, dict):
            raise DecodeError(f"{method} {path}: expected an object result, got {type(result).__name__}")
        if "id" not in result and "volumeId" not in result:
            raise DecodeError(f"{method} {path}: result has no identifier")
        return result

    async def _many(self, path: str, **kwargs: Any) -> list[dict[str, Any]]:
        result = await self._request("GET", path, expect_result=False, **kwargs)
        if result is None:
            return []
        if not isinstance(result, list):
            raise DecodeError(f"GET {path}: expected a list result, got {type(result).__name__}")
        return result

    # =========================================================================
    # Compute instances
    # =========================================================================

    async def create_instance(self, body: CreateInstanceRequest) -> CloudServiceResponse:
        self._log.debug("Creating instance in {region}", region=body["regionId"])
        return cast(CloudServiceResponse, await self._one("POST", "/v2/Instance", json=dict(body)))

    async def get_instance(self, instance_id: int) -> CloudServiceResponse:
        return cast(CloudServiceResponse, await self._one("GET", f"/v2/Instance/{instance_id}"))

    async def instance_power_command(self, instance_id: int, command: str) -> None:
        await self._request(
            "POST", f"/v2/Instance/{instance_id}/PowerCommand",
            params={"command": command}, expect_result=False,
        )

    async def delete_instance(self, instance_id: int) -> None:
        await self._request("DELETE", f"/v2/Instance/{instance_id}", expect_result=False)

    # =========================================================================
    # Metal
    # =========================================================================

    async def create_metal(self, body: CreateMetalRequest) -> MetalServiceResponse:
        self._log.debug("Creating metal {tier} in {region}", tier=body["tierId"], region=body["regionId"])
        return cast(MetalServiceResponse, await self._one("POST", "/v2/Metal", json=dict(body)))

    async def get_metal(self, metal_id: int) -> MetalServiceResponse:
        return cast(MetalServiceResponse, await self._one("GET", f"/v2/Metal/{metal_id}"))

    async def rename_metal(self, metal_id: int, name: str) -> None:
        await self._request(
            "POST", f"/v2/Metal/{metal_id}/Rename", json={"name": name}, expect_result=False,
        )

    async def metal_power_command(self, metal_id: int, command: str) -> None:
        await self._request(
            "POST", f"/v2/Metal/{metal_id}/PowerCommand",
            params={"command": command}, expect_result=False,
        )

    async def delete_metal(self, metal_id: int, project_id: int | None) -> None:
        # v2 has no metal delete; v1 does.
        await self._request(
            "DELETE", f"/v1/Metal/{metal_id}",
            params=_params(projectId=project_id), expect_result=False,
        )

    # =========================================================================
    # Networks
    # =========================================================================

    async def create_network(
        self, body: CreateNetworkRequest, project_id: int | None,
    ) -> NetworkResponse:
        return cast(NetworkResponse, await self._one(
            "POST", "/v2/Network", json=dict(body), params=_params(projectId=project_id),
        ))

    async def list_networks(self, project_id: int | None) -> list[NetworkResponse]:
        return cast(list[NetworkResponse], await self._many(
            "/v2/Network", params=_params(projectId=project_id),
        ))

    async def delete_network(self, network_id: str, project_id: int | None) -> None:
        await self._request(
            "DELETE", f"/v2/Network/{network_id}",
            params=_params(projectId=project_id), expect_result=False,
        )

    # =========================================================================
    # Volumes
    # =========================================================================

    async def create_volume(
        self, body: CreateVolumeRequest, project_id: int | None,
    ) -> VolumeResponse:
        return cast(VolumeResponse, await self._one(
            "POST", "/v2/Volume", json=dict(body), params=_params(projectId=project_id),
        ))

    async def list_volumes(self, project_id: int | None) -> list[VolumeResponse]:
        return cast(list[VolumeResponse], await self._many(
            "/v2/Volume", params=_params(projectId=project_id),
        ))

    async def delete_volume(self, body: DeleteVolumeRequest, project_id: int | None) -> None:
        await self._request(
            "DELETE", "/v2/Volume",
            json=dict(body), params=_params(projectId=project_id), expect_result=False,
        )


__all__ = ["TeraswitchClient"]
