#!/usr/bin/env python3

"""
Service Provider Adapter

Presents a ``LifetimeScope`` of the external container through the resolution
contract the web host uses per request, and exposes the registrations visible
from it for diagnostics.
"""

import logging
from typing import Any, List, Optional, Protocol, TypeVar, runtime_checkable

from ..container import ComponentRegistration, LifetimeScope

logger = logging.getLogger(__name__)

T = TypeVar('T')

REQUEST_SCOPE_TAG = "request"


@runtime_checkable
class ServiceProvider(Protocol):
    """Resolution contract the host expects"""

    def get_service(self, service_type: Any) -> Optional[Any]: ...

    def get_required_service(self, service_type: Any) -> Any: ...

    def resolve(self, service_type: Any) -> Any: ...


class ScopedServiceProvider:
    """``ServiceProvider`` backed by one lifetime scope"""

    def __init__(self, scope: LifetimeScope):
        self._scope = scope

    @property
    def lifetime_scope(self) -> LifetimeScope:
        return self._scope

    def get_service(self, service_type: Any) -> Optional[Any]:
        """Resolve an optional service; ``None`` when nothing is registered"""
        return self._scope.try_resolve(service_type).get_or_else(None)

    def get_required_service(self, service_type: Any) -> Any:
        """Resolve a required service; raises ``ResolutionError`` when missing"""
        return self._scope.resolve(service_type)

    resolve = get_required_service

    def create_instance(self, implementation: type, **overrides: Any) -> Any:
        """Activate a class that need not be registered, injecting its dependencies"""
        return self._scope.activate(implementation, **overrides)

    def registrations(self) -> List[ComponentRegistration]:
        """Every registration visible from this provider, nearest scope first"""
        return self._scope.registrations(include_ancestors=True)

    def create_scope(self) -> 'ServiceScope':
        """Derive a fresh request scope nested under this provider's scope"""
        return ServiceScopeFactory(self._scope).create_scope()

    def __repr__(self) -> str:
        return f"<ScopedServiceProvider {self._scope!r}>"


class ServiceScope:
    """A request-lifetime scope and its provider; disposing it releases the scope"""

    def __init__(self, scope: LifetimeScope):
        self._scope = scope
        self.service_provider = ScopedServiceProvider(scope)

    @property
    def is_disposed(self) -> bool:
        return self._scope.is_disposed

    def dispose(self) -> None:
        self._scope.dispose()

    def __enter__(self) -> 'ServiceScope':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


class ServiceScopeFactory:
    """Derives a fresh child scope per call; safe to call concurrently"""

    def __init__(self, scope: LifetimeScope, tag: str = REQUEST_SCOPE_TAG):
        self._scope = scope
        self._tag = tag

    def create_scope(self) -> ServiceScope:
        return ServiceScope(self._scope.begin_lifetime_scope(tag=self._tag))
