#!/usr/bin/env python3

"""
Request Services

Gives every HTTP request its own scope derived from the grafted host scope and
releases it when the request finishes, whether the response completed or the
request failed.
"""

import logging
from typing import Any

from fastapi import Depends, Request
from starlette.types import ASGIApp, Receive, Scope, Send

from .service_provider import ScopedServiceProvider

logger = logging.getLogger(__name__)

REQUEST_SERVICES_KEY = "request_services"


class RequestServicesMiddleware:
    """ASGI middleware deriving a fresh service scope per request"""

    def __init__(self, app: ASGIApp, scope_factory: ScopedServiceProvider):
        self.app = app
        self.scope_factory = scope_factory

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        service_scope = self.scope_factory.create_scope()
        scope[REQUEST_SERVICES_KEY] = service_scope.service_provider
        try:
            await self.app(scope, receive, send)
        finally:
            service_scope.dispose()


def get_request_services(request: Request) -> ScopedServiceProvider:
    """The current request's service provider"""
    services = request.scope.get(REQUEST_SERVICES_KEY)
    if services is None:
        raise RuntimeError("No request services: RequestServicesMiddleware is not installed")
    return services


def Resolve(service_type: Any) -> Any:
    """FastAPI dependency resolving ``service_type`` from the request scope"""
    def dependency(request: Request) -> Any:
        return get_request_services(request).get_required_service(service_type)

    return Depends(dependency)
