#!/usr/bin/env python3

"""
Lifetime Scopes

A ``LifetimeScope`` resolves services from its own registry first and then from
its ancestors. Child scopes are cheap to create and independent of each other;
the root scope is the process-wide ``Container``.

Instance ownership:
- singletons are built by, cached in and disposed with the scope that owns the
  registration, so every descendant sees the same instance;
- scoped instances are cached in the scope that resolved them;
- disposable scoped and transient instances are released, newest first, when
  the resolving scope is disposed. Scopes that live as long as the process
  (the root container, the grafted host scope) do not track transients; the
  caller that resolved one owns it.
"""

import inspect
import logging
import threading
import typing
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar, get_type_hints

from ..functional.result_monad import Result, Success, Failure
from .errors import (
    ResolutionError, DependencyCycleError, ScopeDisposedError, describe_service
)
from .registration import ActivatorKind, ComponentRegistration, ComponentRegistry, Lifetime

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Resolution is synchronous, so the in-progress chain is tracked per thread
_resolution_state = threading.local()


def _resolution_stack() -> List[Tuple[str, Any]]:
    stack = getattr(_resolution_state, 'stack', None)
    if stack is None:
        stack = []
        _resolution_state.stack = stack
    return stack


class LifetimeScope:
    """Resolution context with a parent link and its own registrations"""

    def __init__(self,
                 registry: ComponentRegistry,
                 parent: Optional['LifetimeScope'] = None,
                 tag: Optional[str] = None,
                 track_transients: bool = True):
        self._registry = registry
        self._parent = parent
        self.tag = tag or registry.tag
        self.track_transients = track_transients
        self._shared_instances: Dict[Any, Any] = {}
        self._disposables: List[Any] = []
        self._lock = threading.RLock()
        self._disposed = False

    @property
    def parent(self) -> Optional['LifetimeScope']:
        return self._parent

    @property
    def component_registry(self) -> ComponentRegistry:
        return self._registry

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def ancestry(self) -> Iterator['LifetimeScope']:
        """This scope followed by each ancestor up to the root"""
        scope: Optional[LifetimeScope] = self
        while scope is not None:
            yield scope
            scope = scope._parent

    def registrations(self, include_ancestors: bool = True) -> List[ComponentRegistration]:
        """Registrations visible from this scope, nearest scope first"""
        scopes = self.ancestry() if include_ancestors else iter([self])
        return [registration for scope in scopes for registration in scope._registry]

    def begin_lifetime_scope(self,
                             configure: Optional[Callable[[Any], None]] = None,
                             tag: Optional[str] = None,
                             track_transients: bool = True) -> 'LifetimeScope':
        """Open a child scope, optionally adding registrations visible only to it.

        ``configure`` receives a ``ContainerBuilder``; its registrations are
        applied before the child scope is handed out.
        """
        self._ensure_not_disposed()
        registry = ComponentRegistry(tag=tag)
        if configure is not None:
            from .builder import ContainerBuilder
            builder = ContainerBuilder()
            configure(builder)
            builder.apply_to(registry)
        child = LifetimeScope(registry, parent=self, tag=tag, track_transients=track_transients)
        logger.debug(f"Began lifetime scope '{tag}' under '{self.tag}' "
                     f"with {len(registry)} registrations")
        return child

    def find_registration(self, service: Any) -> Optional[Tuple[ComponentRegistration, 'LifetimeScope']]:
        """Nearest registration for a service and the scope that owns it"""
        for scope in self.ancestry():
            registration = scope._registry.lookup(service)
            if registration is not None:
                return registration, scope
        return None

    def is_registered(self, service: Any) -> bool:
        return self.find_registration(service) is not None

    def resolve(self, service: Any) -> Any:
        """Resolve a required service, raising ``ResolutionError`` when it is missing"""
        self._ensure_not_disposed()
        found = self.find_registration(service)
        if found is None:
            raise ResolutionError(
                f"Service not registered: {describe_service(service)}", service=service
            )
        registration, owner = found
        return self._resolve_registration(service, registration, owner)

    def try_resolve(self, service: Any) -> Result[Any, ResolutionError]:
        """Resolve a service, reporting a missing registration as a Failure"""
        if not self.is_registered(service):
            return Failure(ResolutionError(
                f"Service not registered: {describe_service(service)}", service=service
            ))
        return Success(self.resolve(service))

    def activate(self, implementation: Any, **overrides: Any) -> Any:
        """Construct ``implementation`` with constructor dependencies from this scope.

        The implementation does not need to be registered. Parameters are filled
        from ``overrides``, then from registered services matching their type
        hints, then from their defaults.
        """
        self._ensure_not_disposed()
        cls = typing.get_origin(implementation) or implementation
        init = cls.__init__
        if init is object.__init__:
            return implementation()

        signature = inspect.signature(init)
        hints = _init_type_hints(cls)
        kwargs: Dict[str, Any] = {}

        for name, param in signature.parameters.items():
            if name == 'self' or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if name in overrides:
                kwargs[name] = overrides[name]
                continue

            annotation = hints.get(name, param.annotation)
            if annotation is not inspect.Parameter.empty and self.is_registered(annotation):
                kwargs[name] = self.resolve(annotation)
            elif param.default is not inspect.Parameter.empty:
                continue
            else:
                wanted = (describe_service(annotation)
                          if annotation is not inspect.Parameter.empty else "no annotation")
                raise ResolutionError(
                    f"Cannot resolve parameter '{name}' of {describe_service(cls)}: "
                    f"no registration for {wanted}",
                    service=annotation,
                )

        return implementation(**kwargs)

    def dispose(self) -> None:
        """Release instances created by this scope, newest first"""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            disposables = list(reversed(self._disposables))
            self._disposables.clear()
            self._shared_instances.clear()

        for instance in disposables:
            try:
                if hasattr(instance, 'dispose'):
                    instance.dispose()
                elif hasattr(instance, 'close'):
                    instance.close()
            except Exception as e:
                logger.error(f"Error disposing {type(instance).__name__} in scope '{self.tag}': {e}")

        logger.debug(f"Disposed lifetime scope '{self.tag}' ({len(disposables)} instances released)")

    def __enter__(self) -> 'LifetimeScope':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def _ensure_not_disposed(self) -> None:
        if self._disposed:
            raise ScopeDisposedError(self.tag)

    def _resolve_registration(self,
                              service: Any,
                              registration: ComponentRegistration,
                              owner: 'LifetimeScope') -> Any:
        if registration.kind is ActivatorKind.INSTANCE:
            return registration.instance

        if registration.lifetime is Lifetime.SINGLETON:
            return owner._get_or_create(service, registration)
        if registration.lifetime is Lifetime.SCOPED:
            return self._get_or_create(service, registration)

        instance = self._create(service, registration)
        if self.track_transients:
            self._track(instance)
        return instance

    def _get_or_create(self, service: Any, registration: ComponentRegistration) -> Any:
        # Open generics produce one instance per closed service type
        key = (registration.id, service) if registration.is_open_generic else registration.id
        with self._lock:
            self._ensure_not_disposed()
            if key in self._shared_instances:
                return self._shared_instances[key]
            instance = self._create(service, registration)
            self._shared_instances[key] = instance
            self._track(instance)
            return instance

    def _create(self, service: Any, registration: ComponentRegistration) -> Any:
        stack = _resolution_stack()
        frame = (registration.id, service)
        if frame in stack:
            chain = " -> ".join(describe_service(s) for _, s in stack + [frame])
            raise DependencyCycleError(f"Circular dependency detected: {chain}", service=service)

        stack.append(frame)
        try:
            if registration.kind is ActivatorKind.FACTORY:
                return registration.factory(self)
            if registration.kind is ActivatorKind.OPEN_GENERIC:
                return self.activate(registration.implementation[typing.get_args(service)])
            return self.activate(registration.implementation)
        finally:
            stack.pop()

    def _track(self, instance: Any) -> None:
        if hasattr(instance, 'dispose') or hasattr(instance, 'close'):
            with self._lock:
                self._disposables.append(instance)

    def __repr__(self) -> str:
        depth = sum(1 for _ in self.ancestry()) - 1
        return f"<LifetimeScope tag={self.tag!r} depth={depth} registrations={len(self._registry)}>"


class Container(LifetimeScope):
    """The root lifetime scope; built once per process by ``ContainerBuilder``"""

    def __init__(self, registry: ComponentRegistry):
        super().__init__(registry, parent=None, tag=registry.tag or "root", track_transients=False)


def _init_type_hints(cls: type) -> Dict[str, Any]:
    try:
        return get_type_hints(cls.__init__)
    except (TypeError, NameError) as e:
        logger.warning(f"Could not read constructor type hints of {cls.__name__}: {e}")
        return {}
