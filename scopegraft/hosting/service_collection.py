#!/usr/bin/env python3

"""
Service Collection

The host's own registration model: the services its request pipeline expects
to find. A collection is only a list of descriptors; it becomes resolvable once
the scope grafter merges it into a child scope of the external container.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional

from ..container import ConfigurationError, ContainerBuilder, Lifetime, describe_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceDescriptor:
    """One host service requirement"""
    service_type: Any
    lifetime: Lifetime
    implementation_type: Optional[type] = None
    factory: Optional[Callable[[Any], Any]] = None
    instance: Any = None

    def __post_init__(self):
        provided = [x is not None for x in (self.implementation_type, self.factory, self.instance)]
        if sum(provided) != 1:
            raise ConfigurationError(
                f"Descriptor for {describe_service(self.service_type)} needs exactly one of "
                f"implementation_type, factory or instance"
            )
        if self.instance is not None and self.lifetime is not Lifetime.SINGLETON:
            raise ConfigurationError(
                f"Instance descriptor for {describe_service(self.service_type)} must be a singleton"
            )

    def register_into(self, builder: ContainerBuilder) -> None:
        if self.instance is not None:
            builder.register_instance(self.instance, self.service_type)
        elif self.factory is not None:
            builder.register_factory(self.factory, self.service_type, lifetime=self.lifetime)
        else:
            builder.register_type(self.implementation_type, self.service_type, lifetime=self.lifetime)

    def __str__(self) -> str:
        return f"{describe_service(self.service_type)} ({self.lifetime.value})"


class ServiceCollection:
    """Ordered, append-only list of ``ServiceDescriptor``"""

    def __init__(self):
        self._descriptors: List[ServiceDescriptor] = []

    def add(self, descriptor: ServiceDescriptor) -> 'ServiceCollection':
        self._descriptors.append(descriptor)
        return self

    def add_singleton(self,
                      service_type: Any,
                      implementation_type: Optional[type] = None,
                      factory: Optional[Callable[[Any], Any]] = None) -> 'ServiceCollection':
        return self._add_typed(service_type, Lifetime.SINGLETON, implementation_type, factory)

    def add_scoped(self,
                   service_type: Any,
                   implementation_type: Optional[type] = None,
                   factory: Optional[Callable[[Any], Any]] = None) -> 'ServiceCollection':
        return self._add_typed(service_type, Lifetime.SCOPED, implementation_type, factory)

    def add_transient(self,
                      service_type: Any,
                      implementation_type: Optional[type] = None,
                      factory: Optional[Callable[[Any], Any]] = None) -> 'ServiceCollection':
        return self._add_typed(service_type, Lifetime.TRANSIENT, implementation_type, factory)

    def add_instance(self, service_type: Any, instance: Any) -> 'ServiceCollection':
        return self.add(ServiceDescriptor(service_type, Lifetime.SINGLETON, instance=instance))

    def contains(self, service_type: Any) -> bool:
        return any(d.service_type == service_type for d in self._descriptors)

    def validate(self) -> None:
        """Reject duplicate singleton descriptors for one service type"""
        counts = Counter(
            d.service_type for d in self._descriptors if d.lifetime is Lifetime.SINGLETON
        )
        duplicates = [describe_service(s) for s, n in counts.items() if n > 1]
        if duplicates:
            raise ConfigurationError(
                f"Duplicate singleton registrations cannot coexist: {', '.join(duplicates)}"
            )

    def _add_typed(self, service_type, lifetime, implementation_type, factory) -> 'ServiceCollection':
        if implementation_type is None and factory is None:
            implementation_type = service_type
        return self.add(ServiceDescriptor(
            service_type, lifetime, implementation_type=implementation_type, factory=factory
        ))

    def __iter__(self) -> Iterator[ServiceDescriptor]:
        return iter(list(self._descriptors))

    def __len__(self) -> int:
        return len(self._descriptors)
