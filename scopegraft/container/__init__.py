"""
Dependency Injection Container Module

The process-wide container, its child lifetime scopes and registrations.
"""

from .errors import (
    ContainerError,
    ConfigurationError,
    ResolutionError,
    DependencyCycleError,
    ScopeDisposedError,
    describe_service
)
from .registration import (
    Lifetime,
    ActivatorKind,
    ComponentRegistration,
    ComponentRegistry
)
from .lifetime_scope import LifetimeScope, Container
from .builder import ContainerBuilder

__all__ = [
    "ContainerError",
    "ConfigurationError",
    "ResolutionError",
    "DependencyCycleError",
    "ScopeDisposedError",
    "describe_service",
    "Lifetime",
    "ActivatorKind",
    "ComponentRegistration",
    "ComponentRegistry",
    "LifetimeScope",
    "Container",
    "ContainerBuilder"
]
