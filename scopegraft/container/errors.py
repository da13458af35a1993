"""
Container errors.

``ConfigurationError`` is fatal at startup, ``ResolutionError`` is raised to the
caller of a required resolution and never replaced by a ``None``.
"""

from typing import Any, Optional


class ContainerError(Exception):
    """Base class for all container failures."""


class ConfigurationError(ContainerError):
    """Invalid wiring detected while composing the application."""


class ResolutionError(ContainerError):
    """A requested service could not be supplied by any reachable scope."""

    def __init__(self, message: str, service: Any = None):
        super().__init__(message)
        self.service = service


class DependencyCycleError(ResolutionError):
    """A service depends on itself, directly or transitively."""


class ScopeDisposedError(ContainerError):
    """Resolution was attempted on a scope that has already been disposed."""

    def __init__(self, tag: Optional[str] = None):
        super().__init__(f"Lifetime scope '{tag or 'anonymous'}' has been disposed")
        self.tag = tag


def describe_service(service: Any) -> str:
    """Fully qualified, human readable name of a service key."""
    if isinstance(service, str):
        return service
    if isinstance(service, type):
        module = getattr(service, '__module__', '')
        name = getattr(service, '__qualname__', service.__name__)
        if module and module not in ('builtins', '__main__'):
            return f"{module}.{name}"
        return name
    # Generic aliases render their own arguments
    return repr(service)
