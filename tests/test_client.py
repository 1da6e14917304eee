from __future__ import annotations

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from tswitch import ProviderConfig, TeraswitchClient
from tswitch.errors import ApiError, ConfigError, DecodeError

from .conftest import API_KEY, PROJECT_ID, FakeTeraswitch

pytestmark = [pytest.mark.unit]


def test_requires_api_key():
    with pytest.raises(ConfigError):
        TeraswitchClient(ProviderConfig())


# ─── Endpoints ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_bearer_token_on_every_request(client: TeraswitchClient, fake: FakeTeraswitch):
    created = await client.create_instance({"regionId": "PIT1", "tierId": "cc-2x4"})
    await client.get_instance(created["id"])
    assert [c.path for c in fake.calls] == ["/v2/Instance", f"/v2/Instance/{created['id']}"]


@pytest.mark.asyncio
async def test_wrong_key_is_an_api_error(config: ProviderConfig):
    bad = ProviderConfig(api_key="wrong", base_url=config.base_url)
    async with TeraswitchClient(bad) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.get_instance(1)
    assert exc_info.value.status == 401


@pytest.mark.asyncio
async def test_envelope_is_unwrapped(client: TeraswitchClient):
    created = await client.create_instance({"regionId": "PIT1", "tierId": "cc-2x4"})
    assert created["status"] == "Provisioning"
    assert "success" not in created


@pytest.mark.asyncio
async def test_power_command_query(client: TeraswitchClient, fake: FakeTeraswitch):
    created = await client.create_instance({"regionId": "PIT1", "tierId": "cc-2x4"})
    await client.instance_power_command(created["id"], "PowerOff")
    call = fake.calls_to("POST", f"/v2/Instance/{created['id']}/PowerCommand")[0]
    assert call.query == {"command": "PowerOff"}


@pytest.mark.asyncio
async def test_metal_delete_uses_v1_with_project(client: TeraswitchClient, fake: FakeTeraswitch):
    created = await client.create_metal({"regionId": "PIT1", "tierId": "t", "quantity": 1})
    await client.delete_metal(created["id"], PROJECT_ID)
    call = fake.calls_to("DELETE", f"/v1/Metal/{created['id']}")[0]
    assert call.query == {"projectId": str(PROJECT_ID)}


@pytest.mark.asyncio
async def test_project_param_omitted_when_unset(client: TeraswitchClient, fake: FakeTeraswitch):
    assert await client.list_networks(None) == []
    assert fake.calls_to("GET", "/v2/Network")[0].query == {}


@pytest.mark.asyncio
async def test_volume_delete_sends_body(client: TeraswitchClient, fake: FakeTeraswitch):
    created = await client.create_volume(
        {"regionId": "PIT1", "displayName": "d", "volumeType": "nvme", "size": 10}, PROJECT_ID,
    )
    await client.delete_volume({"regionId": "PIT1", "volumeId": created["volumeId"]}, PROJECT_ID)
    call = fake.calls_to("DELETE", "/v2/Volume")[0]
    assert call.body == {"regionId": "PIT1", "volumeId": created["volumeId"]}
    assert fake.volumes == {}


# ─── Envelope errors ─────────────────────────────────────────────────


def make_app() -> web.Application:
    app = web.Application()

    async def rejected(_: web.Request) -> web.Response:
        return web.json_response({"success": False, "message": "tier sold out"})

    async def no_result(_: web.Request) -> web.Response:
        return web.json_response({"success": True})

    async def bare_list(_: web.Request) -> web.Response:
        return web.json_response([1, 2, 3])

    async def no_id(_: web.Request) -> web.Response:
        return web.json_response({"success": True, "result": {"status": "Active"}})

    app.router.add_post("/v2/Instance", rejected)
    app.router.add_get("/v2/Instance/1", no_result)
    app.router.add_get("/v2/Instance/2", no_id)
    app.router.add_get("/v2/Volume", bare_list)
    return app


@pytest.fixture
async def odd_client():
    srv = TestServer(make_app())
    await srv.start_server()
    config = ProviderConfig(api_key=API_KEY, base_url=f"http://{srv.host}:{srv.port}")
    async with TeraswitchClient(config) as client:
        yield client
    await srv.close()


@pytest.mark.asyncio
async def test_unsuccessful_envelope(odd_client: TeraswitchClient):
    with pytest.raises(ApiError) as exc_info:
        await odd_client.create_instance({"regionId": "PIT1", "tierId": "t"})
    assert exc_info.value.body == "tier sold out"


@pytest.mark.asyncio
async def test_missing_result(odd_client: TeraswitchClient):
    with pytest.raises(DecodeError, match="no result"):
        await odd_client.get_instance(1)


@pytest.mark.asyncio
async def test_result_without_identifier(odd_client: TeraswitchClient):
    with pytest.raises(DecodeError, match="identifier"):
        await odd_client.get_instance(2)


@pytest.mark.asyncio
async def test_response_without_envelope(odd_client: TeraswitchClient):
    with pytest.raises(DecodeError, match="JSON object"):
        await odd_client.list_volumes(None)
