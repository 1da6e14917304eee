"""Failure taxonomy for tswitch.

Every error raised by the library derives from ``TeraswitchError`` so callers
can catch the whole family, while the subclasses let them tell a remote
rejection apart from a transport failure or a wait that ran out of time.
"""

from __future__ import annotations

from dataclasses import dataclass


class TeraswitchError(Exception):
    """Base class for all tswitch errors."""


class ConfigError(TeraswitchError):
    """Provider configuration is missing or invalid."""


# ─── Transport ───────────────────────────────────────────────────────


class TransportError(TeraswitchError):
    """The request never produced an HTTP response (DNS, TLS, connection)."""


@dataclass(frozen=True, slots=True)
class ApiError(TeraswitchError):
    status: int
    body: str

    def __str__(self) -> str:
        return f"HTTP {self.status}: {self.body}"


class DecodeError(TeraswitchError):
    """Response body could not be decoded into the expected shape."""


class NotFoundError(TeraswitchError):
    """A lookup by identifier found no matching remote resource."""


# ─── Polling ─────────────────────────────────────────────────────────


class WaitCancelled(TeraswitchError):
    """Poll loop ended by the caller's cancellation signal."""

    def __init__(self, description: str, target: str, last_status: str | None, attempts: int) -> None:
        self.description = description
        self.target = target
        self.last_status = last_status
        self.attempts = attempts
        super().__init__(
            f"Stopped waiting for {description} to reach {target!r} "
            f"after {attempts} fetches (last status: {last_status!r})"
        )


class WaitTimeout(WaitCancelled):
    """Poll loop ended because the caller's deadline expired."""


# ─── Planning ────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FieldError:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class ValidationFailed(TeraswitchError):
    """Desired state was rejected before any remote call."""

    def __init__(self, kind: str, errors: list[FieldError]) -> None:
        self.kind = kind
        self.errors = errors
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"Invalid {kind} configuration: {details}")


class ReplacementRequired(TeraswitchError):
    """An update changed fields that can only be set at creation time."""

    def __init__(self, kind: str, fields: tuple[str, ...]) -> None:
        self.kind = kind
        self.fields = fields
        super().__init__(
            f"{kind} fields {', '.join(fields)} cannot be changed in place; "
            "the resource must be replaced"
        )


__all__ = [
    "ApiError",
    "ConfigError",
    "DecodeError",
    "FieldError",
    "NotFoundError",
    "ReplacementRequired",
    "TeraswitchError",
    "TransportError",
    "ValidationFailed",
    "WaitCancelled",
    "WaitTimeout",
]
