#!/usr/bin/env python3

"""
Startup

The host's startup object. It is constructed with the composition bridge as
its only input and never builds a container of its own: ``configure_services``
grafts the host onto the external container, ``configure`` lays out the
request pipeline.
"""

import logging
from typing import Optional

from ..configuration import ConfigurationRoot
from ..container import ConfigurationError
from ..diagnostics.introspection import DiagnosticsOptions, IntrospectionMiddleware
from ..diagnostics.logger_factory import LoggerFactory, LoggingSettings
from ..mvc.home_controller import create_home_router, render_error_page
from ..mvc.host_services import add_mvc
from .application_builder import ApplicationBuilder
from .bridge import CompositionBridge
from .environment import HostingEnvironment
from .grafting import graft
from .service_collection import ServiceCollection
from .service_provider import ScopedServiceProvider

logger = logging.getLogger(__name__)


class Startup:
    def __init__(self, bridge: CompositionBridge):
        self.bridge = bridge
        self._application_services: Optional[ScopedServiceProvider] = None

    @property
    def configuration(self) -> ConfigurationRoot:
        return self.bridge.configuration

    @property
    def application_services(self) -> Optional[ScopedServiceProvider]:
        return self._application_services

    def configure_services(self, services: ServiceCollection) -> ScopedServiceProvider:
        """Graft the host onto the external container; runs once per process"""
        if self._application_services is not None:
            raise ConfigurationError("Startup.configure_services has already run")

        add_mvc(services, self.bridge)
        self._application_services = graft(self.bridge, services)
        return self._application_services

    def configure(self, app: ApplicationBuilder) -> None:
        services = app.application_services
        environment = services.get_required_service(HostingEnvironment)

        logger_factory = services.get_service(LoggerFactory)
        if logger_factory is not None:
            logger_factory.add_console(self.configuration.get_section("Logging").bind(LoggingSettings))

        diagnostics = services.get_required_service(DiagnosticsOptions)
        app.use(
            IntrospectionMiddleware,
            query_key=diagnostics.introspection_query_key,
            enabled=diagnostics.introspection_enabled,
        )

        if environment.is_development():
            app.use_developer_exception_page()
        else:
            app.use_exception_handler(render_error_page)

        if environment.web_root_path is not None:
            app.use_static_files(environment.web_root_path)

        app.map_routes(create_home_router())
