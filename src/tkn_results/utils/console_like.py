from __future__ import annotations

from typing import Protocol

from loguru import logger
from rich.console import ConsoleRenderable

from tkn_results.core.errors import ConfigError


class ConsoleLike(Protocol):
    def print(self, msg: ConsoleRenderable | str | None = None) -> None: ...

    def info(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def ok(self, msg: str) -> None: ...

    def ask(self, message: str, default: str = "", *, password: bool = False) -> str: ...

    def choose(self, title: str, options: list[str], descriptions: list[str] | None = None) -> str: ...


class NonInteractiveConsole:
    """Console for runs without a terminal.

    Output goes to the log; any prompt is a configuration error.
    """

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        logger.info(str(msg))

    def info(self, msg: str) -> None:
        logger.info(msg)

    def warn(self, msg: str) -> None:
        logger.warning(msg)

    def ok(self, msg: str) -> None:
        logger.info(msg)

    def ask(self, message: str, default: str = "", *, password: bool = False) -> str:
        if default:
            return default
        raise ConfigError(f"{message.rstrip(' :')} is required", details="prompting is disabled")

    def choose(self, title: str, options: list[str], descriptions: list[str] | None = None) -> str:
        if len(options) == 1:
            return options[0]
        raise ConfigError(f"{title.rstrip(' :')} is required", details="prompting is disabled")


def coalesce_console(console: ConsoleLike | None) -> ConsoleLike:
    return console if console is not None else NonInteractiveConsole()
