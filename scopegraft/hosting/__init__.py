"""
Hosting Module

Grafts the web host onto an externally built container and derives one
service scope per request. ``Startup`` and ``WebHostBuilder`` live in
``scopegraft.hosting.startup`` and ``scopegraft.hosting.web_host``.
"""

from .environment import (
    HostingEnvironment,
    create_environment,
    discover_web_root
)
from .bridge import CompositionBridge
from .service_collection import ServiceCollection, ServiceDescriptor
from .service_provider import (
    ServiceProvider,
    ScopedServiceProvider,
    ServiceScope,
    ServiceScopeFactory
)
from .grafting import graft, find_singleton_conflicts
from .request_services import (
    RequestServicesMiddleware,
    get_request_services,
    Resolve
)
from .application_builder import ApplicationBuilder

__all__ = [
    "HostingEnvironment",
    "create_environment",
    "discover_web_root",
    "CompositionBridge",
    "ServiceCollection",
    "ServiceDescriptor",
    "ServiceProvider",
    "ScopedServiceProvider",
    "ServiceScope",
    "ServiceScopeFactory",
    "graft",
    "find_singleton_conflicts",
    "RequestServicesMiddleware",
    "get_request_services",
    "Resolve",
    "ApplicationBuilder"
]
