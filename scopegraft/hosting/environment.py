#!/usr/bin/env python3

"""
Hosting Environment

Describes where the application runs: its name, the environment name
(Development, Staging, Production) and its content and web roots.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..container.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEVELOPMENT = "Development"
STAGING = "Staging"
PRODUCTION = "Production"

WEB_ROOT_DIRECTORY = "wwwroot"


class HostingEnvironment(BaseModel):
    """Immutable description of the hosting environment"""
    model_config = ConfigDict(frozen=True)

    application_name: str = Field(..., description="Name of the application")
    environment_name: str = Field(default=PRODUCTION, description="Development, Staging or Production")
    content_root_path: Path = Field(..., description="Directory holding settings and content")
    web_root_path: Optional[Path] = Field(default=None, description="Directory served as static files")

    def is_environment(self, name: str) -> bool:
        return self.environment_name.casefold() == name.casefold()

    def is_development(self) -> bool:
        return self.is_environment(DEVELOPMENT)

    def is_staging(self) -> bool:
        return self.is_environment(STAGING)

    def is_production(self) -> bool:
        return self.is_environment(PRODUCTION)


def discover_web_root(start: Union[str, Path, None] = None) -> Path:
    """Walk up from ``start`` to the first directory containing ``wwwroot``.

    Returns the content root (the directory that contains ``wwwroot``).
    """
    current = Path(start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / WEB_ROOT_DIRECTORY).is_dir():
            logger.debug(f"Discovered content root: {candidate}")
            return candidate
    raise ConfigurationError(f"Unable to discover {WEB_ROOT_DIRECTORY} above {current}")


def create_environment(application_name: str,
                       environment_name: str = PRODUCTION,
                       content_root: Union[str, Path, None] = None) -> HostingEnvironment:
    """Build a ``HostingEnvironment`` rooted at the discovered content root"""
    if content_root is None:
        content_root = discover_web_root()
    content_root = Path(content_root).resolve()
    web_root = content_root / WEB_ROOT_DIRECTORY
    return HostingEnvironment(
        application_name=application_name,
        environment_name=environment_name,
        content_root_path=content_root,
        web_root_path=web_root if web_root.is_dir() else None,
    )
