"""Per-kind translators and CRUD handlers."""

from .base import ResourceHandler, power_command
from .compute import ComputeHandler
from .metal import MetalHandler
from .network import NetworkHandler
from .volume import VolumeHandler

__all__ = [
    "ComputeHandler",
    "MetalHandler",
    "NetworkHandler",
    "ResourceHandler",
    "VolumeHandler",
    "power_command",
]
