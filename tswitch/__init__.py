"""tswitch - declarative TeraSwitch resources from Python.

Example:

    from tswitch import ComputeInstanceSpec, Orchestrator, ProviderConfig, TeraswitchClient

    config = ProviderConfig(project_id=480).resolve()

    async with TeraswitchClient(config) as client:
        orchestrator = Orchestrator(client)
        web = orchestrator.track(ComputeInstanceSpec(
            region_id="PIT1",
            tier_id="cc-2x4",
            display_name="web",
            boot_size=20,
            ssh_key_ids=(588,),
        ))
        await orchestrator.create(web)
        print(web.observed.ip_addresses)
"""

from loguru import logger

# Library is silent until setup_logging() is called
logger.disable("tswitch")

from tswitch.api import (  # noqa: E402
    ComputeInstanceSpec,
    ComputeInstanceState,
    MetalSpec,
    MetalState,
    NetworkSpec,
    NetworkState,
    Partition,
    Phase,
    RaidArray,
    Tracked,
    VolumeSpec,
    VolumeState,
    spec_from_mapping,
)
from tswitch.client import TeraswitchClient  # noqa: E402
from tswitch.config import (  # noqa: E402
    ProviderConfig,
    load_config,
    load_provider,
    load_resources,
)
from tswitch.errors import (  # noqa: E402
    ApiError,
    ConfigError,
    DecodeError,
    FieldError,
    NotFoundError,
    ReplacementRequired,
    TeraswitchError,
    TransportError,
    ValidationFailed,
    WaitCancelled,
    WaitTimeout,
)
from tswitch.observability import LogConfig, setup_logging, teardown_logging  # noqa: E402
from tswitch.orchestrator import Orchestrator  # noqa: E402
from tswitch.validation import ensure_valid, validate  # noqa: E402
from tswitch.wait import wait_for_status  # noqa: E402

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "ComputeInstanceSpec",
    "ComputeInstanceState",
    "ConfigError",
    "DecodeError",
    "FieldError",
    "LogConfig",
    "MetalSpec",
    "MetalState",
    "NetworkSpec",
    "NetworkState",
    "NotFoundError",
    "Orchestrator",
    "Partition",
    "Phase",
    "ProviderConfig",
    "RaidArray",
    "ReplacementRequired",
    "TeraswitchClient",
    "TeraswitchError",
    "Tracked",
    "TransportError",
    "ValidationFailed",
    "VolumeSpec",
    "VolumeState",
    "WaitCancelled",
    "WaitTimeout",
    "ensure_valid",
    "load_config",
    "load_provider",
    "load_resources",
    "setup_logging",
    "spec_from_mapping",
    "teardown_logging",
    "validate",
    "wait_for_status",
]
