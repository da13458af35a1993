#!/usr/bin/env python3

"""
Logger Factory

Process-wide logging entry point. The factory lives in the external container
as a singleton instance; typed loggers (``ILogger[T]``) are produced from an
open generic registration and log under the qualified name of ``T``.
"""

import logging
import sys
import typing
from typing import Any, Dict, Generic, Optional, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..container.errors import ConfigurationError, describe_service

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'

# Level names used in settings files, mapped onto stdlib levels
LEVEL_NAMES: Dict[str, int] = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "information": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "none": logging.CRITICAL + 10,
}


def parse_level(name: str) -> int:
    try:
        return LEVEL_NAMES[str(name).casefold()]
    except KeyError:
        raise ConfigurationError(f"Unknown log level: {name}") from None


class LoggingSettings(BaseModel):
    """The ``Logging`` configuration section"""
    model_config = ConfigDict(populate_by_name=True)

    log_level: Dict[str, str] = Field(default_factory=lambda: {"Default": "Information"}, alias="LogLevel")
    format: str = Field(default=DEFAULT_FORMAT, alias="Format")

    @field_validator("log_level")
    @classmethod
    def check_levels(cls, levels: Dict[str, str]) -> Dict[str, str]:
        checked: Dict[str, str] = {}
        for category, level_name in levels.items():
            if level_name.casefold() not in LEVEL_NAMES:
                raise ValueError(f"Unknown log level '{level_name}' for category '{category}'")
            # One Default entry; the later spelling wins
            checked["Default" if category.casefold() == "default" else category] = level_name
        return checked


class LoggerFactory:
    """Creates category loggers and owns the console handler"""

    def __init__(self, stream: Any = None):
        self._stream = stream
        self._handler: Optional[logging.Handler] = None

    def create_logger(self, category: str) -> logging.Logger:
        return logging.getLogger(category)

    def add_console(self, settings: Optional[LoggingSettings] = None) -> 'LoggerFactory':
        """Install (or reconfigure) the console handler from logging settings"""
        settings = settings or LoggingSettings()
        root = logging.getLogger()

        if self._handler is None:
            self._handler = logging.StreamHandler(self._stream or sys.stderr)
            root.addHandler(self._handler)
        self._handler.setFormatter(logging.Formatter(settings.format))

        for category, level_name in settings.log_level.items():
            level = parse_level(level_name)
            if category.casefold() == "default":
                root.setLevel(level)
            else:
                logging.getLogger(category).setLevel(level)

        logger.debug(f"Console logging configured: {settings.log_level}")
        return self

    def dispose(self) -> None:
        if self._handler is not None:
            logging.getLogger().removeHandler(self._handler)
            self._handler = None


class ILogger(Protocol[T]):
    """Logger whose category is the type it is injected into"""

    @property
    def category(self) -> str: ...

    def debug(self, msg: str, *args: Any) -> None: ...

    def info(self, msg: str, *args: Any) -> None: ...

    def warning(self, msg: str, *args: Any) -> None: ...

    def error(self, msg: str, *args: Any) -> None: ...


class Logger(Generic[T]):
    """``ILogger[T]`` implementation backed by a stdlib logger"""

    def __init__(self, factory: LoggerFactory):
        self._factory = factory
        self._logger: Optional[logging.Logger] = None

    @property
    def category(self) -> str:
        # Set by typing once the closed alias (Logger[X]) has constructed us
        args = typing.get_args(getattr(self, '__orig_class__', None))
        return describe_service(args[0]) if args else __name__

    @property
    def logger(self) -> logging.Logger:
        if self._logger is None:
            self._logger = self._factory.create_logger(self.category)
        return self._logger

    def debug(self, msg: str, *args: Any) -> None:
        self.logger.debug(msg, *args)

    def info(self, msg: str, *args: Any) -> None:
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args: Any) -> None:
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self.logger.error(msg, *args)
