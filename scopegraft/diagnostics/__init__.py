"""
Diagnostics Module

Logging for the process and introspection of the services visible to a request.
"""

from .logger_factory import (
    LoggerFactory,
    LoggingSettings,
    ILogger,
    Logger
)
from .introspection import (
    IntrospectionMiddleware,
    DiagnosticsOptions,
    describe_registrations,
    render_report
)

__all__ = [
    "LoggerFactory",
    "LoggingSettings",
    "ILogger",
    "Logger",
    "IntrospectionMiddleware",
    "DiagnosticsOptions",
    "describe_registrations",
    "render_report"
]
