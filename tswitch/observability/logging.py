"""Opt-in loguru sinks for tswitch.

Every module logs through ``logger.bind(component=...)`` or
``logger.bind(resource=...)``, and ``tswitch/__init__.py`` disables the
package so nothing reaches the application's sinks by default.
``setup_logging`` re-enables it and adds sinks that only accept tswitch
records; each line is prefixed with a scope such as ``[orchestrator]`` or
``[metal#1001]`` built from the bound context.

Global logger state (``logger.configure``) is never touched, so
``teardown_logging`` only has to drop the sinks it added.

Example:
    handlers = setup_logging(LogConfig(level="DEBUG", console=True))
    try:
        await orchestrator.create(web)
    finally:
        teardown_logging(handlers)
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Record

type LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]

_SCOPE = "tswitch_scope"

CONSOLE_FORMAT = (
    "<dim>{time:HH:mm:ss}</dim> <level>{level.name:<7}</level> "
    "<magenta>{extra[tswitch_scope]}</magenta><level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DDTHH:mm:ss.SSSZZ} {level.name:<7} {name}:{line} {extra[tswitch_scope]}{message}"


def scope_of(extra: Mapping[str, Any]) -> str:
    """Render bound context as ``[component/resource#id] ``, or nothing."""
    name = "/".join(str(extra[k]) for k in ("component", "resource") if k in extra)
    if "id" in extra:
        name = f"{name}#{extra['id']}"
    return f"[{name}] " if name else ""


def _formatter(template: str) -> Callable[[Record], str]:
    line = template + "\n{exception}"

    def render(record: Record) -> str:
        record["extra"][_SCOPE] = scope_of(record["extra"])
        return line

    return render


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Where tswitch logs go.

    ``level`` applies to the console; the file sink always records DEBUG
    and up. ``rotation`` and ``retention`` are passed to loguru unchanged.
    """

    level: LogLevel = "INFO"
    file: str | None = ".tswitch/tswitch.log"
    console: bool = False
    rotation: str = "50 MB"
    retention: int = 10


def setup_logging(config: LogConfig) -> list[int]:
    """Enable tswitch logging and return the ids of the sinks added."""
    sinks: list[int] = []
    if config.console:
        sinks.append(logger.add(
            sys.stderr,
            level=config.level,
            format=_formatter(CONSOLE_FORMAT),
            filter="tswitch",
            colorize=True,
        ))
    if config.file:
        path = Path(config.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        sinks.append(logger.add(
            path,
            level="DEBUG",
            format=_formatter(FILE_FORMAT),
            filter="tswitch",
            rotation=config.rotation,
            retention=config.retention,
            diagnose=False,
        ))
    logger.enable("tswitch")
    return sinks


def teardown_logging(handler_ids: list[int]) -> None:
    """Drop the sinks from ``setup_logging`` and silence tswitch again."""
    logger.disable("tswitch")
    for sink in handler_ids:
        logger.remove(sink)


__all__ = ["CONSOLE_FORMAT", "FILE_FORMAT", "LogConfig", "LogLevel", "scope_of", "setup_logging", "teardown_logging"]
