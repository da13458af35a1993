#!/usr/bin/env python3

"""
Scope Grafting

Turns the process-wide container into the web host's service provider without
rebuilding it: one child scope is opened under the external container and the
host's own service requirements are registered into it while it is created.
Request scopes are then derived from that grafted scope, one per request.
"""

import logging
from typing import List

from ..container import ConfigurationError, ContainerBuilder, Lifetime, LifetimeScope, describe_service
from .bridge import CompositionBridge
from .service_collection import ServiceCollection
from .service_provider import ScopedServiceProvider, ServiceProvider, ServiceScopeFactory

logger = logging.getLogger(__name__)

GRAFTED_SCOPE_TAG = "host"


def find_singleton_conflicts(container: LifetimeScope, services: ServiceCollection) -> List[str]:
    """Host singletons that would shadow a process-wide singleton"""
    conflicts = []
    for descriptor in services:
        if descriptor.lifetime is not Lifetime.SINGLETON:
            continue
        found = container.find_registration(descriptor.service_type)
        if found is not None and found[0].lifetime is Lifetime.SINGLETON:
            registration, owner = found
            conflicts.append(
                f"{describe_service(descriptor.service_type)} is already a singleton "
                f"in scope '{owner.tag}' ({registration.activator_description})"
            )
    return conflicts


def graft(bridge: CompositionBridge, services: ServiceCollection) -> ScopedServiceProvider:
    """Open the host's child scope under the external container.

    Returns the host-level provider; request scopes come from its
    ``create_scope``. Any conflict between the host's requirements and the
    external container raises ``ConfigurationError`` here, before the host
    serves a single request.
    """
    services.validate()

    conflicts = find_singleton_conflicts(bridge.container, services)
    if conflicts:
        for conflict in conflicts:
            logger.error(f"Service conflict: {conflict}")
        raise ConfigurationError(
            "Host services conflict with the external container: " + "; ".join(conflicts)
        )

    def populate(builder: ContainerBuilder) -> None:
        for descriptor in services:
            descriptor.register_into(builder)
        builder.register_instance(bridge, CompositionBridge)
        # Resolve to whichever scope asks, so request scopes get their own
        builder.register_factory(ScopedServiceProvider, ServiceProvider, lifetime=Lifetime.SCOPED)
        builder.register_factory(ServiceScopeFactory, ServiceScopeFactory, lifetime=Lifetime.SCOPED)

    scope = bridge.container.begin_lifetime_scope(populate, tag=GRAFTED_SCOPE_TAG, track_transients=False)
    logger.info(f"Grafted host scope onto external container with {len(services)} host services "
                f"({len(scope.registrations())} registrations visible)")
    return ScopedServiceProvider(scope)
