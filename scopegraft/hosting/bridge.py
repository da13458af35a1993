#!/usr/bin/env python3

"""
Composition Bridge

Carries the externally built container, the hosting environment and the
configuration root into the host's startup object. Created once at process
start and never mutated; the bridge does not own (or dispose) the container.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..configuration import ConfigurationRoot
from ..container import LifetimeScope, ConfigurationError
from .environment import HostingEnvironment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompositionBridge:
    """Immutable hand-off from the process composition root to the web host"""
    container: LifetimeScope
    environment: HostingEnvironment
    configuration: Optional[ConfigurationRoot] = None

    def __post_init__(self):
        if self.container is None:
            raise ConfigurationError("CompositionBridge requires a container")
        if self.environment is None:
            raise ConfigurationError("CompositionBridge requires a hosting environment")
        if self.configuration is None:
            object.__setattr__(self, 'configuration', ConfigurationRoot({}))
        logger.debug(f"Composition bridge created for {self.environment.application_name} "
                     f"({self.environment.environment_name})")
