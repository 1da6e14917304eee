"""Provider configuration and TOML resource declarations.

``ProviderConfig`` is the one piece of process-wide state: it is built once,
resolved against the environment, and handed to the client and the
orchestrator explicitly.

Declarations live in ``~/.tswitch/defaults.toml`` (global) and
``tswitch.toml`` (project); the two are deep-merged, project winning::

    [provider]
    project_id = 480

    [resources.web]
    kind = "compute"
    region_id = "PIT1"
    tier_id = "cc-2x4"
    display_name = "web"
    boot_size = 20
    ssh_key_ids = [588]
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tswitch.errors import ConfigError

if TYPE_CHECKING:
    from tswitch.api.spec import ResourceSpec

type RawConfig = dict[str, Any]

DEFAULT_BASE_URL = "https://api.tsw.io"
API_KEY_ENV = "TERASWITCH_API_KEY"
PROJECT_ID_ENV = "TERASWITCH_PROJECT_ID"

GLOBAL_CONFIG_PATH = Path.home() / ".tswitch" / "defaults.toml"
PROJECT_CONFIG_NAME = "tswitch.toml"


# =============================================================================
# Provider
# =============================================================================


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """TeraSwitch provider configuration.

    Example:
        >>> from tswitch import ProviderConfig
        >>> config = ProviderConfig(project_id=480).resolve()

    Args:
        api_key: API key. Falls back to TERASWITCH_API_KEY env var.
        project_id: Default project for resources that don't set one.
            Falls back to TERASWITCH_PROJECT_ID env var.
        base_url: API endpoint. Default: https://api.tsw.io.
        request_timeout: Per-request timeout in seconds. Default: 30.
        poll_interval: Seconds between readiness polls. Default: 3.
        ready_timeout: Deadline in seconds for readiness polls. None waits
            until the caller cancels.
    """

    api_key: str | None = None
    project_id: int | None = None
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 30.0
    poll_interval: float = 3.0
    ready_timeout: float | None = None

    def resolve(self) -> ProviderConfig:
        """Fill ``api_key`` and ``project_id`` from the environment."""
        api_key = self.api_key or os.environ.get(API_KEY_ENV)
        if not api_key:
            raise ConfigError(
                "api_key is required. Set it on the provider configuration "
                f"or via the {API_KEY_ENV} environment variable."
            )

        project_id = self.project_id
        if project_id is None:
            raw = os.environ.get(PROJECT_ID_ENV)
            if raw is not None:
                try:
                    project_id = int(raw)
                except ValueError as e:
                    raise ConfigError(
                        f"{PROJECT_ID_ENV} must be an integer, got {raw!r}"
                    ) from e

        return replace(self, api_key=api_key, project_id=project_id)

    def project_for(self, project_id: int | None) -> int | None:
        """Resource-level project id, else the provider default."""
        return project_id if project_id is not None else self.project_id

    def __repr__(self) -> str:
        key = "***" if self.api_key else None
        return (
            f"ProviderConfig(api_key={key!r}, project_id={self.project_id!r}, "
            f"base_url={self.base_url!r})"
        )


# =============================================================================
# TOML loading
# =============================================================================


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    with path.open("rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("provider", {})
    merged.setdefault("resources", {})
    return merged


def load_provider(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> ProviderConfig:
    raw = load_config(project_dir=project_dir, global_path=global_path)["provider"]
    known = {f.name for f in fields(ProviderConfig)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigError(
            f"Unknown provider settings: {', '.join(sorted(unknown))}. "
            f"Valid: {', '.join(sorted(known))}"
        )
    return ProviderConfig(**raw)


def load_resources(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> dict[str, ResourceSpec]:
    """Build a typed desired-state record for every ``[resources.*]`` table."""
    from tswitch.api.spec import spec_from_mapping

    raw = load_config(project_dir=project_dir, global_path=global_path)["resources"]
    resources: dict[str, ResourceSpec] = {}
    for name, table in raw.items():
        table = dict(table)
        kind = table.pop("kind", None)
        if kind is None:
            raise ConfigError(f"Resource '{name}' missing 'kind' field")
        resources[name] = spec_from_mapping(kind, table)
    return resources


__all__ = [
    "API_KEY_ENV",
    "DEFAULT_BASE_URL",
    "PROJECT_ID_ENV",
    "ProviderConfig",
    "load_config",
    "load_provider",
    "load_resources",
]
