#!/usr/bin/env python3

"""
Host Pipeline Services

The services the request pipeline expects to resolve: per-request context,
controller activation, diagnostics options and the hosting environment and
configuration themselves.
"""

import logging
import threading
import uuid
from typing import Any, Type, TypeVar

from fastapi import Depends, Request

from ..configuration import ConfigurationRoot
from ..diagnostics.introspection import DiagnosticsOptions
from ..hosting.bridge import CompositionBridge
from ..hosting.environment import HostingEnvironment
from ..hosting.request_services import get_request_services
from ..hosting.service_collection import ServiceCollection
from ..hosting.service_provider import ScopedServiceProvider

logger = logging.getLogger(__name__)

C = TypeVar('C')


class RequestContext:
    """Per-request identity; one instance per request scope"""

    def __init__(self):
        self.request_id = str(uuid.uuid4())


class ControllerActivator:
    """Creates controllers with dependencies from the request's provider"""

    def __init__(self):
        self.activations = 0
        self._lock = threading.Lock()

    def create(self, controller_type: Type[C], services: ScopedServiceProvider) -> C:
        controller = services.create_instance(controller_type)
        with self._lock:
            self.activations += 1
        logger.debug(f"Activated {controller_type.__name__}")
        return controller


def add_mvc(services: ServiceCollection, bridge: CompositionBridge) -> ServiceCollection:
    """Add the request-pipeline service set to the host's collection"""
    services.add_scoped(RequestContext)
    services.add_singleton(ControllerActivator)

    diagnostics = bridge.configuration.get_section("Diagnostics").bind(DiagnosticsOptions)
    services.add_instance(DiagnosticsOptions, diagnostics)

    # The external container may already provide these
    if not bridge.container.is_registered(HostingEnvironment):
        services.add_instance(HostingEnvironment, bridge.environment)
    if not bridge.container.is_registered(ConfigurationRoot):
        services.add_instance(ConfigurationRoot, bridge.configuration)
    return services


def Activate(controller_type: Type[C]) -> Any:
    """FastAPI dependency activating ``controller_type`` for the current request"""
    def dependency(request: Request) -> C:
        services = get_request_services(request)
        activator = services.get_required_service(ControllerActivator)
        return activator.create(controller_type, services)

    return Depends(dependency)
