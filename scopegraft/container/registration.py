#!/usr/bin/env python3

"""
Component Registrations

A registration maps one or more service keys to a way of producing an instance
(pre-built instance, implementation type, factory or open generic type) and a
lifetime. A ``ComponentRegistry`` holds the registrations of exactly one scope.
"""

import inspect
import logging
import threading
import typing
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .errors import ConfigurationError, describe_service

logger = logging.getLogger(__name__)


class Lifetime(Enum):
    """How long a resolved instance lives"""
    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"


class ActivatorKind(Enum):
    INSTANCE = "instance"
    TYPE = "type"
    FACTORY = "factory"
    OPEN_GENERIC = "open_generic"


@dataclass(frozen=True)
class ComponentRegistration:
    """Registration information for one component"""
    services: Tuple[Any, ...]
    kind: ActivatorKind
    lifetime: Lifetime
    implementation: Optional[type] = None
    factory: Optional[Callable[..., Any]] = None
    instance: Any = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_open_generic(self) -> bool:
        return self.kind is ActivatorKind.OPEN_GENERIC

    @property
    def activator_description(self) -> str:
        if self.kind is ActivatorKind.INSTANCE:
            return f"instance of {describe_service(type(self.instance))}"
        if self.kind is ActivatorKind.FACTORY:
            return f"factory {getattr(self.factory, '__qualname__', repr(self.factory))}"
        return describe_service(self.implementation)

    def __str__(self) -> str:
        services = ", ".join(describe_service(s) for s in self.services)
        return f"[{services}] -> {self.activator_description} ({self.lifetime.value})"


def is_generic_definition(tp: Any) -> bool:
    """True for classes declaring type parameters, e.g. ``class Logger(Generic[T])``"""
    return inspect.isclass(tp) and bool(getattr(tp, '__parameters__', ()))


def _is_protocol(tp: Any) -> bool:
    if hasattr(typing, 'is_protocol'):
        return inspect.isclass(tp) and typing.is_protocol(tp)
    return inspect.isclass(tp) and getattr(tp, '_is_protocol', False)


def validate_assignable(service: Any, implementation: type) -> None:
    """Reject implementations that cannot stand in for a nominal service type"""
    if not inspect.isclass(service) or _is_protocol(service):
        return
    if not issubclass(implementation, service):
        raise ConfigurationError(
            f"{describe_service(implementation)} is not assignable to service "
            f"{describe_service(service)}"
        )


class ComponentRegistry:
    """Ordered registrations of a single lifetime scope.

    Lookups only consider this registry; falling back to ancestors is the job of
    the owning scope. The most recent registration for a service wins.
    """

    def __init__(self, tag: Optional[str] = None):
        self.tag = tag
        self._registrations: List[ComponentRegistration] = []
        self._by_service: Dict[Any, ComponentRegistration] = {}
        self._open_generics: Dict[Any, ComponentRegistration] = {}
        self._lock = threading.RLock()

    def register(self, registration: ComponentRegistration) -> None:
        with self._lock:
            self._registrations.append(registration)
            target = self._open_generics if registration.is_open_generic else self._by_service
            for service in registration.services:
                target[service] = registration
        logger.debug(f"Registered {registration} in scope '{self.tag}'")

    def lookup(self, service: Any) -> Optional[ComponentRegistration]:
        """Find the registration for a service key in this registry only"""
        with self._lock:
            registration = self._by_service.get(service)
            if registration is not None:
                return registration
            origin = typing.get_origin(service)
            if origin is not None:
                return self._open_generics.get(origin)
            return None

    def __iter__(self) -> Iterator[ComponentRegistration]:
        with self._lock:
            return iter(list(self._registrations))

    def __len__(self) -> int:
        return len(self._registrations)
