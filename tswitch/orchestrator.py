"""CRUD orchestration over tracked resources.

The orchestrator sequences validate → create → (poll) → read → update →
delete for every resource kind, recording progress on a ``Tracked`` record.
It never retries: a failed step leaves the record in ``Phase.FAILED`` with
the error attached and re-raises it.

Example:
    async with TeraswitchClient(ProviderConfig().resolve()) as client:
        orchestrator = Orchestrator(client)
        web = orchestrator.track(ComputeInstanceSpec(...))
        await orchestrator.create(web)
        await orchestrator.update(web, replace(web.desired, desired_power_state="Off"))
        await orchestrator.delete(web)
"""

from __future__ import annotations

import asyncio
from dataclasses import fields
from typing import Any

from loguru import logger

from tswitch.api.model import MetalState, ObservedState, Phase, RemoteId, Tracked
from tswitch.api.spec import ResourceSpec
from tswitch.client import TeraswitchClient
from tswitch.errors import ReplacementRequired, TeraswitchError
from tswitch.resources import (
    ComputeHandler,
    MetalHandler,
    NetworkHandler,
    ResourceHandler,
    VolumeHandler,
)
from tswitch.resources.base import ACTIVE
from tswitch.validation import ensure_valid
from tswitch.wait import wait_for_status

log = logger.bind(component="orchestrator")


def changed_fields(old: ResourceSpec, new: ResourceSpec) -> tuple[str, ...]:
    """Names of the fields whose values differ between two specs of one kind."""
    return tuple(
        f.name for f in fields(old)
        if getattr(old, f.name) != getattr(new, f.name)
    )


class Orchestrator:
    def __init__(self, client: TeraswitchClient) -> None:
        self._client = client
        self._metal = MetalHandler(client)
        self._handlers: dict[str, ResourceHandler[Any, Any]] = {
            "compute": ComputeHandler(client),
            "metal": self._metal,
            "network": NetworkHandler(client),
            "volume": VolumeHandler(client),
        }

    def handler(self, kind: str) -> ResourceHandler[Any, Any]:
        try:
            return self._handlers[kind]
        except KeyError:
            raise TeraswitchError(f"No handler for resource kind '{kind}'") from None

    def track[D: ResourceSpec](self, desired: D, identifier: RemoteId | None = None) -> Tracked[D, Any]:
        """Start tracking a declared resource, optionally one that already exists."""
        return Tracked(desired=desired, identifier=identifier)

    @staticmethod
    def _require_identifier(tracked: Tracked[Any, Any]) -> RemoteId:
        if tracked.identifier is None:
            raise TeraswitchError(f"{tracked.kind} resource has not been created")
        return tracked.identifier

    def _fail(self, tracked: Tracked[Any, Any], error: BaseException) -> None:
        tracked.phase = Phase.FAILED
        if isinstance(error, TeraswitchError):
            tracked.error = error
        log.warning(
            "{kind} {id} failed: {error}",
            kind=tracked.kind, id=tracked.identifier, error=str(error) or type(error).__name__,
        )

    async def _await_ready(
        self,
        tracked: Tracked[Any, Any],
        handler: ResourceHandler[Any, Any],
        cancel: asyncio.Event | None,
    ) -> None:
        spec = tracked.desired
        identifier = self._require_identifier(tracked)
        config = self._client.config
        tracked.phase = Phase.POLLING
        try:
            tracked.observed = await wait_for_status(
                lambda: handler.read(spec, identifier),
                ACTIVE,
                status_of=handler.status_of,
                interval=config.poll_interval,
                cancel=cancel,
                timeout=config.ready_timeout,
                description=f"{spec.kind} {identifier}",
            )
        except (TeraswitchError, asyncio.CancelledError) as e:
            self._fail(tracked, e)
            raise

    # =========================================================================
    # Create
    # =========================================================================

    async def create[D: ResourceSpec, O: ObservedState](
        self,
        tracked: Tracked[D, O],
        *,
        cancel: asyncio.Event | None = None,
    ) -> Tracked[D, O]:
        """Create the remote resource and, when requested, wait until it is Active.

        The identifier is recorded as soon as the create call returns, so a
        failed or cancelled readiness poll still leaves a record that points
        at the (existing) remote resource.
        """
        if tracked.created:
            raise TeraswitchError(
                f"{tracked.kind} resource already exists as {tracked.identifier}"
            )

        spec = tracked.desired
        try:
            ensure_valid(spec)
        except TeraswitchError as e:
            tracked.error = e
            raise

        handler = self.handler(spec.kind)
        tracked.phase = Phase.CREATING
        tracked.error = None
        try:
            observed = await handler.create(spec)
        except (TeraswitchError, asyncio.CancelledError) as e:
            self._fail(tracked, e)
            raise

        tracked.identifier = observed.id
        tracked.observed = observed

        if handler.wants_ready(spec):
            await self._await_ready(tracked, handler, cancel)

        tracked.phase = Phase.READY
        log.info("{kind} {id} ready", kind=spec.kind, id=tracked.identifier)
        return tracked

    # =========================================================================
    # Read / Update / Delete
    # =========================================================================

    async def read[D: ResourceSpec, O: ObservedState](self, tracked: Tracked[D, O]) -> Tracked[D, O]:
        identifier = self._require_identifier(tracked)
        handler = self.handler(tracked.kind)
        try:
            tracked.observed = await handler.read(tracked.desired, identifier)
        except (TeraswitchError, asyncio.CancelledError) as e:
            self._fail(tracked, e)
            raise
        return tracked

    async def update[D: ResourceSpec, O: ObservedState](
        self, tracked: Tracked[D, O], desired: D,
    ) -> Tracked[D, O]:
        """Move ``tracked`` to a new desired state in place.

        Raises ``ReplacementRequired`` before any remote call when a field
        outside the kind's mutable set changed.
        """
        identifier = self._require_identifier(tracked)
        old = tracked.desired
        if type(desired) is not type(old):
            raise TypeError(
                f"Cannot update {type(old).__name__} to {type(desired).__name__}"
            )

        changed = changed_fields(old, desired)
        if not changed:
            return tracked

        immutable = tuple(name for name in changed if name not in old.mutable)
        if immutable:
            raise ReplacementRequired(old.kind, immutable)
        ensure_valid(desired)

        log.debug("{kind} {id} changed: {fields}", kind=old.kind, id=identifier, fields=changed)
        tracked.phase = Phase.UPDATING
        tracked.error = None
        try:
            await self.handler(old.kind).update(identifier, old, desired)
        except (TeraswitchError, asyncio.CancelledError) as e:
            self._fail(tracked, e)
            raise

        tracked.desired = desired
        tracked.phase = Phase.READY
        return tracked

    async def delete[D: ResourceSpec, O: ObservedState](self, tracked: Tracked[D, O]) -> Tracked[D, O]:
        """Delete the remote resource and forget its identifier.

        On failure the identifier is kept: the resource must be assumed to
        still exist.
        """
        identifier = self._require_identifier(tracked)
        tracked.phase = Phase.DELETING
        tracked.error = None
        try:
            await self.handler(tracked.kind).delete(tracked.desired, identifier)
        except (TeraswitchError, asyncio.CancelledError) as e:
            self._fail(tracked, e)
            raise

        tracked.identifier = None
        tracked.observed = None
        tracked.phase = Phase.DELETED
        return tracked

    async def reconcile[D: ResourceSpec, O: ObservedState](
        self,
        tracked: Tracked[D, O],
        desired: D | None = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> Tracked[D, O]:
        """Bring the remote side in line with ``desired`` (or the tracked spec).

        Creates when nothing was created yet. Otherwise refreshes the observed
        state, resuming the readiness poll when an earlier one did not finish,
        and applies in-place changes.
        """
        if not tracked.created:
            if desired is not None:
                tracked.desired = desired
            return await self.create(tracked, cancel=cancel)

        handler = self.handler(tracked.kind)
        unsettled = tracked.phase in (Phase.CREATING, Phase.POLLING, Phase.FAILED)
        if unsettled and handler.wants_ready(tracked.desired):
            await self._await_ready(tracked, handler, cancel)
        else:
            await self.read(tracked)
        tracked.phase = Phase.READY
        tracked.error = None

        if desired is not None and desired != tracked.desired:
            await self.update(tracked, desired)
        return tracked

    # =========================================================================
    # Lookups
    # =========================================================================

    async def lookup_metal(self, metal_id: int) -> MetalState:
        """Everything the API reports about an existing metal server."""
        return await self._metal.lookup(metal_id)


__all__ = ["Orchestrator", "changed_fields"]
