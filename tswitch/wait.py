"""Poll-until-status loop used to wait for resources to become ready.

The loop has no attempt cap and no backoff: the remote side decides how long
provisioning takes and the caller bounds it, either with a cancellation event
or a deadline.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from tswitch.errors import WaitCancelled, WaitTimeout

DEFAULT_INTERVAL = 3.0

log = logger.bind(component="wait")


async def _sleep_or_cancel(cancel: asyncio.Event, delay: float) -> bool:
    """Sleep for ``delay`` seconds. Returns True if ``cancel`` fired first."""
    try:
        await asyncio.wait_for(cancel.wait(), timeout=delay)
    except TimeoutError:
        return False
    return True


async def wait_for_status[T](
    fetch: Callable[[], Awaitable[T]],
    target: str,
    *,
    status_of: Callable[[T], str | None],
    interval: float = DEFAULT_INTERVAL,
    cancel: asyncio.Event | None = None,
    timeout: float | None = None,
    description: str = "resource",
) -> T:
    """Fetch until the observed status equals ``target``.

    The first fetch happens right away; each later fetch is preceded by a
    fixed ``interval`` wait. Cancellation is checked before every fetch and
    wins over issuing another one.

    Args:
        fetch: Coroutine factory returning the current observed state.
        target: Status string that ends the loop successfully.
        status_of: Extracts the status from an observed state; ``None`` means
            the remote side has not reported one yet.
        interval: Seconds to wait between fetches.
        cancel: Event that stops the loop when set.
        timeout: Deadline in seconds, measured from the call.
        description: Label used in log lines and errors.

    Returns:
        The observed state whose status matched ``target``.

    Raises:
        WaitCancelled: ``cancel`` was set before the target was reached.
        WaitTimeout: ``timeout`` expired before the target was reached.
        TeraswitchError: Whatever ``fetch`` raised, unchanged and unretried.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout if timeout is not None else None
    cancel = cancel or asyncio.Event()
    last_status: str | None = None
    attempts = 0

    while True:
        if cancel.is_set():
            raise WaitCancelled(description, target, last_status, attempts)

        if attempts:
            delay = interval
            expires = False
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= interval:
                    delay, expires = max(remaining, 0.0), True
            if await _sleep_or_cancel(cancel, delay):
                raise WaitCancelled(description, target, last_status, attempts)
            if expires:
                raise WaitTimeout(description, target, last_status, attempts)
        elif deadline is not None and deadline <= loop.time():
            raise WaitTimeout(description, target, last_status, attempts)

        observed = await fetch()
        attempts += 1
        status = status_of(observed)

        if status is None:
            log.trace("{what} has no status yet", what=description)
            continue

        last_status = status
        if status != target:
            log.debug(
                "Waiting for {what} status {want!r}, current status {got!r}",
                what=description, want=target, got=status,
            )
            continue

        return observed


__all__ = ["DEFAULT_INTERVAL", "wait_for_status"]
