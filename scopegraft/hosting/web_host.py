#!/usr/bin/env python3

"""
Web Host

Builds the FastAPI application from a ``Startup`` class the same way every
time: construct the startup with the composition bridge, let it graft its
services onto the external container, then let it configure the pipeline.
"""

import logging
from contextlib import asynccontextmanager
from typing import Callable, List, Optional, Type

import uvicorn
from fastapi import FastAPI

from ..container import ConfigurationError
from .application_builder import ApplicationBuilder
from .bridge import CompositionBridge
from .service_collection import ServiceCollection
from .service_provider import ScopedServiceProvider
from .startup import Startup

logger = logging.getLogger(__name__)


class WebHost:
    """A built application plus the grafted host scope it resolves from"""

    def __init__(self, app: FastAPI, services: ScopedServiceProvider, bridge: CompositionBridge):
        self.app = app
        self.services = services
        self.bridge = bridge

    def dispose(self) -> None:
        """Release the grafted host scope; the external container is left alone"""
        self.services.lifetime_scope.dispose()
        logger.info("Host scope disposed")

    def run(self, host: str = "127.0.0.1", port: int = 8000, log_level: str = "info") -> None:
        logger.info(f"Starting {self.bridge.environment.application_name} on {host}:{port} "
                    f"({self.bridge.environment.environment_name})")
        uvicorn.run(self.app, host=host, port=port, reload=False, log_level=log_level)


class WebHostBuilder:
    def __init__(self, bridge: CompositionBridge):
        self._bridge = bridge
        self._startup_class: Type[Startup] = Startup
        self._service_callbacks: List[Callable[[ServiceCollection], None]] = []
        self._built = False

    def use_startup(self, startup_class: Type[Startup]) -> 'WebHostBuilder':
        self._startup_class = startup_class
        return self

    def configure_services(self, callback: Callable[[ServiceCollection], None]) -> 'WebHostBuilder':
        """Add host services ahead of the startup's own"""
        self._service_callbacks.append(callback)
        return self

    def build(self) -> WebHost:
        if self._built:
            raise ConfigurationError("WebHostBuilder.build() may only be called once")
        self._built = True

        startup = self._startup_class(self._bridge)
        services = ServiceCollection()
        for callback in self._service_callbacks:
            callback(services)

        application_services = startup.configure_services(services)
        app_builder = ApplicationBuilder(application_services, title=self._bridge.environment.application_name)
        startup.configure(app_builder)

        host: Optional[WebHost] = None

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            logger.info("Application started")
            yield
            host.dispose()

        host = WebHost(app_builder.build(lifespan=lifespan), application_services, self._bridge)
        return host
