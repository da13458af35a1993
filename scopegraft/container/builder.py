#!/usr/bin/env python3

"""
Container Builder

Collects registrations and either builds the process-wide ``Container`` or
applies them to a child scope opened with ``begin_lifetime_scope``.
"""

import inspect
import logging
from typing import Any, Callable, List, Optional, TypeVar

from .errors import ConfigurationError, describe_service
from .lifetime_scope import Container
from .registration import (
    ActivatorKind, ComponentRegistration, ComponentRegistry, Lifetime,
    is_generic_definition, validate_assignable
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ContainerBuilder:
    """Registration API for the external container and its child scopes"""

    def __init__(self):
        self._registrations: List[ComponentRegistration] = []
        self._built = False

    def register_instance(self, instance: Any, *services: Any) -> 'ContainerBuilder':
        """Register a pre-built instance; it is shared and never disposed by the container"""
        if instance is None:
            raise ConfigurationError("Cannot register None as an instance")
        services = services or (type(instance),)
        for service in services:
            if inspect.isclass(service):
                validate_assignable(service, type(instance))
        return self._add(ComponentRegistration(
            services=tuple(services),
            kind=ActivatorKind.INSTANCE,
            lifetime=Lifetime.SINGLETON,
            instance=instance,
        ))

    def register_type(self,
                      implementation: type,
                      *services: Any,
                      lifetime: Lifetime = Lifetime.TRANSIENT) -> 'ContainerBuilder':
        """Register a type activated through constructor injection"""
        if not inspect.isclass(implementation):
            raise ConfigurationError(f"{implementation!r} is not a class")
        services = services or (implementation,)
        for service in services:
            validate_assignable(service, implementation)
        return self._add(ComponentRegistration(
            services=tuple(services),
            kind=ActivatorKind.TYPE,
            lifetime=lifetime,
            implementation=implementation,
        ))

    def register_factory(self,
                         factory: Callable[[Any], T],
                         service: Any,
                         lifetime: Lifetime = Lifetime.TRANSIENT) -> 'ContainerBuilder':
        """Register a callable receiving the resolving scope"""
        if not callable(factory):
            raise ConfigurationError(f"Factory for {describe_service(service)} is not callable")
        return self._add(ComponentRegistration(
            services=(service,),
            kind=ActivatorKind.FACTORY,
            lifetime=lifetime,
            factory=factory,
        ))

    def register_generic(self,
                         implementation: type,
                         *services: type,
                         lifetime: Lifetime = Lifetime.TRANSIENT) -> 'ContainerBuilder':
        """Register an open generic, e.g. any ``ILogger[T]`` as ``Logger[T]``"""
        if not is_generic_definition(implementation):
            raise ConfigurationError(
                f"{describe_service(implementation)} declares no type parameters"
            )
        services = services or (implementation,)
        for service in services:
            if not is_generic_definition(service):
                raise ConfigurationError(
                    f"Open generic service {describe_service(service)} declares no type parameters"
                )
        return self._add(ComponentRegistration(
            services=tuple(services),
            kind=ActivatorKind.OPEN_GENERIC,
            lifetime=lifetime,
            implementation=implementation,
        ))

    def apply_to(self, registry: ComponentRegistry) -> ComponentRegistry:
        for registration in self._registrations:
            registry.register(registration)
        return registry

    def build(self, tag: Optional[str] = "root") -> Container:
        """Build the root container; a builder can only be built once"""
        if self._built:
            raise ConfigurationError("ContainerBuilder.build() may only be called once")
        self._built = True
        container = Container(self.apply_to(ComponentRegistry(tag=tag)))
        logger.info(f"Built container with {len(self._registrations)} registrations")
        return container

    @property
    def registrations(self) -> List[ComponentRegistration]:
        return list(self._registrations)

    def _add(self, registration: ComponentRegistration) -> 'ContainerBuilder':
        self._registrations.append(registration)
        return self
