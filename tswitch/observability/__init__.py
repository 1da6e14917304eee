"""Observability for tswitch: loguru sinks and formats."""

from .logging import LogConfig, setup_logging, teardown_logging

__all__ = ["LogConfig", "setup_logging", "teardown_logging"]
