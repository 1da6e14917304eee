"""In-process fake of the TeraSwitch API.

Only the endpoints tswitch calls are served. Every request is recorded on
``FakeTeraswitch.calls`` so tests can assert on exactly what was sent.
"""

from __future__ import annotations

import itertools
import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from tswitch import Orchestrator, ProviderConfig, TeraswitchClient

API_KEY = "test-key"
PROJECT_ID = 480


@dataclass
class Call:
    method: str
    path: str
    query: dict[str, str]
    body: Any


@dataclass
class FakeTeraswitch:
    instances: dict[int, dict[str, Any]] = field(default_factory=dict)
    metals: dict[int, dict[str, Any]] = field(default_factory=dict)
    networks: dict[str, dict[str, Any]] = field(default_factory=dict)
    volumes: dict[str, dict[str, Any]] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)
    # Status reported by successive GETs of one resource; the last one sticks.
    statuses: dict[int, list[str | None]] = field(default_factory=dict)
    failures: dict[tuple[str, str], tuple[int, str]] = field(default_factory=dict)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1001))

    def fail(self, method: str, path: str, *, status: int = 500, body: str = "boom") -> None:
        self.failures[(method, path)] = (status, body)

    def calls_to(self, method: str, path: str) -> list[Call]:
        return [c for c in self.calls if c.method == method and c.path == path]

    def next_id(self) -> int:
        return next(self._ids)

    def status_of(self, resource_id: int, stored: dict[str, Any]) -> dict[str, Any]:
        script = self.statuses.get(resource_id)
        if script:
            status = script.pop(0) if len(script) > 1 else script[0]
            stored = {k: v for k, v in stored.items() if k != "status"}
            if status is not None:
                stored["status"] = status
        return stored


def ok(result: Any = None) -> web.Response:
    payload: dict[str, Any] = {"success": True, "message": None}
    if result is not None:
        payload["result"] = result
    return web.json_response(payload)


def not_found(what: str) -> web.Response:
    return web.json_response({"success": False, "message": f"{what} not found"}, status=404)


def make_app(fake: FakeTeraswitch) -> web.Application:
    @web.middleware
    async def record(request: web.Request, handler: Any) -> web.StreamResponse:
        body = await request.json() if request.can_read_body else None
        fake.calls.append(Call(request.method, request.path, dict(request.query), body))
        if request.headers.get("Authorization") != f"Bearer {API_KEY}":
            return web.Response(status=401, text="unauthorized")
        failure = fake.failures.get((request.method, request.path))
        if failure is not None:
            status, text = failure
            return web.Response(status=status, text=text)
        return await handler(request)

    app = web.Application(middlewares=[record])

    # ─── Instances ───────────────────────────────────────────────────

    async def create_instance(request: web.Request) -> web.Response:
        body = await request.json()
        instance = {"id": fake.next_id(), **body, "status": "Provisioning", "powerState": "On"}
        fake.instances[instance["id"]] = instance
        return ok(instance)

    async def get_instance(request: web.Request) -> web.Response:
        instance_id = int(request.match_info["id"])
        instance = fake.instances.get(instance_id)
        if instance is None:
            return not_found("instance")
        reported = fake.status_of(instance_id, instance)
        if reported.get("status") == "Active":
            reported = {**reported, "ipAddresses": ["203.0.113.10"]}
        return ok(reported)

    async def instance_power(request: web.Request) -> web.Response:
        instance = fake.instances.get(int(request.match_info["id"]))
        if instance is None:
            return not_found("instance")
        instance["powerState"] = request.query["command"].removeprefix("Power")
        return ok()

    async def delete_instance(request: web.Request) -> web.Response:
        if fake.instances.pop(int(request.match_info["id"]), None) is None:
            return not_found("instance")
        return ok()

    # ─── Metal ───────────────────────────────────────────────────────

    async def create_metal(request: web.Request) -> web.Response:
        body = await request.json()
        metal = {
            "id": fake.next_id(),
            "regionId": body["regionId"],
            "tierId": body["tierId"],
            "projectId": body.get("projectId"),
            "displayName": body.get("displayName"),
            "tags": body.get("tags"),
            "status": "Provisioning",
            "powerState": "On",
        }
        fake.metals[metal["id"]] = metal
        return ok(metal)

    async def get_metal(request: web.Request) -> web.Response:
        metal_id = int(request.match_info["id"])
        metal = fake.metals.get(metal_id)
        if metal is None:
            return not_found("metal")
        reported = fake.status_of(metal_id, metal)
        if reported.get("status") == "Active":
            reported = {
                **reported,
                "ipAddresses": ["198.51.100.7", "2001:db8::7"],
                "ipv4DefaultGateway": "198.51.100.1",
                "monthlyPrice": 199.0,
                "hourlyPrice": 0.27,
            }
        return ok(reported)

    async def rename_metal(request: web.Request) -> web.Response:
        metal = fake.metals.get(int(request.match_info["id"]))
        if metal is None:
            return not_found("metal")
        metal["displayName"] = (await request.json())["name"]
        return ok()

    async def metal_power(request: web.Request) -> web.Response:
        metal = fake.metals.get(int(request.match_info["id"]))
        if metal is None:
            return not_found("metal")
        metal["powerState"] = request.query["command"].removeprefix("Power")
        return ok()

    async def delete_metal(request: web.Request) -> web.Response:
        if fake.metals.pop(int(request.match_info["id"]), None) is None:
            return not_found("metal")
        return ok()

    # ─── Networks ────────────────────────────────────────────────────

    async def create_network(request: web.Request) -> web.Response:
        body = await request.json()
        network = {"id": str(uuid.uuid4()), **body, "status": "Active"}
        fake.networks[network["id"]] = network
        return ok(network)

    async def list_networks(_: web.Request) -> web.Response:
        return ok(list(fake.networks.values()))

    async def delete_network(request: web.Request) -> web.Response:
        if fake.networks.pop(request.match_info["id"], None) is None:
            return not_found("network")
        return ok()

    # ─── Volumes ─────────────────────────────────────────────────────

    async def create_volume(request: web.Request) -> web.Response:
        body = await request.json()
        volume = {
            "volumeId": str(uuid.uuid4()),
            "region": body["regionId"],
            "displayName": body["displayName"],
            "volumeType": body["volumeType"],
            "size": body["size"],
            "description": body.get("description"),
            "status": "Creating",
        }
        fake.volumes[volume["volumeId"]] = volume
        return ok(volume)

    async def list_volumes(_: web.Request) -> web.Response:
        # Sizes come back as strings from the list endpoint.
        return ok([{**v, "size": str(v["size"]), "status": "Available"} for v in fake.volumes.values()])

    async def delete_volume(request: web.Request) -> web.Response:
        body = await request.json()
        if fake.volumes.pop(body["volumeId"], None) is None:
            return not_found("volume")
        return ok()

    app.router.add_post("/v2/Instance", create_instance)
    app.router.add_get("/v2/Instance/{id}", get_instance)
    app.router.add_post("/v2/Instance/{id}/PowerCommand", instance_power)
    app.router.add_delete("/v2/Instance/{id}", delete_instance)
    app.router.add_post("/v2/Metal", create_metal)
    app.router.add_get("/v2/Metal/{id}", get_metal)
    app.router.add_post("/v2/Metal/{id}/Rename", rename_metal)
    app.router.add_post("/v2/Metal/{id}/PowerCommand", metal_power)
    app.router.add_delete("/v1/Metal/{id}", delete_metal)
    app.router.add_post("/v2/Network", create_network)
    app.router.add_get("/v2/Network", list_networks)
    app.router.add_delete("/v2/Network/{id}", delete_network)
    app.router.add_post("/v2/Volume", create_volume)
    app.router.add_get("/v2/Volume", list_volumes)
    app.router.add_delete("/v2/Volume", delete_volume)
    return app


@pytest.fixture
def fake() -> FakeTeraswitch:
    return FakeTeraswitch()


@pytest.fixture
async def server(fake: FakeTeraswitch) -> AsyncIterator[TestServer]:
    srv = TestServer(make_app(fake))
    await srv.start_server()
    yield srv
    await srv.close()


@pytest.fixture
def base_url(server: TestServer) -> str:
    return f"http://{server.host}:{server.port}"


@pytest.fixture
def config(base_url: str) -> ProviderConfig:
    return ProviderConfig(
        api_key=API_KEY,
        project_id=PROJECT_ID,
        base_url=base_url,
        poll_interval=0.01,
    )


@pytest.fixture
async def client(config: ProviderConfig) -> AsyncIterator[TeraswitchClient]:
    async with TeraswitchClient(config) as c:
        yield c


@pytest.fixture
def orchestrator(client: TeraswitchClient) -> Orchestrator:
    return Orchestrator(client)
