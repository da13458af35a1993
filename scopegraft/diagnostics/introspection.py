#!/usr/bin/env python3

"""
Registration Introspection

First stage of the request pipeline. A request carrying the reserved query key
(``?DEBUG``, value ignored) gets a plain-text listing of every service type
visible from its own request scope instead of normal handling:

    <count>
    <service type>
    <service type>
    ...

Every other request passes straight through.
"""

import logging
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field
from starlette.datastructures import QueryParams
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from ..container import ComponentRegistration, describe_service
from ..functional.result_monad import from_callable
from ..hosting.request_services import get_request_services

logger = logging.getLogger(__name__)

DEFAULT_QUERY_KEY = "DEBUG"


class DiagnosticsOptions(BaseModel):
    """The ``Diagnostics`` configuration section"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    introspection_enabled: bool = Field(default=True, alias="IntrospectionEnabled")
    introspection_query_key: str = Field(default=DEFAULT_QUERY_KEY, alias="IntrospectionQueryKey")


def render_service(service: Any, registration: ComponentRegistration) -> str:
    """One report line for a service key"""
    if registration.is_open_generic:
        parameters = ", ".join(str(p) for p in getattr(service, '__parameters__', ()))
        return f"{describe_service(service)}[{parameters}] (open generic)"
    if isinstance(service, str):
        return f"'{service}' (named)"
    return describe_service(service)


def registrations_of(provider: Any) -> List[ComponentRegistration]:
    if hasattr(provider, 'registrations'):
        return list(provider.registrations())
    if hasattr(provider, 'lifetime_scope'):
        return provider.lifetime_scope.registrations()
    raise TypeError(f"{type(provider).__name__} does not expose its registrations")


def describe_registrations(provider: Any) -> List[str]:
    """Distinct service types visible from ``provider``, in enumeration order.

    An entry that cannot be rendered is labelled instead of failing the report.
    """
    lines: List[str] = []
    seen = set()
    for registration in registrations_of(provider):
        for service in registration.services:
            line = from_callable(lambda: render_service(service, registration)).fold(
                lambda text: text,
                lambda error: f"<unrenderable {type(service).__name__} registration: {error}>",
            )
            if line in seen:
                continue
            seen.add(line)
            lines.append(line)
    return lines


def render_report(lines: List[str]) -> str:
    return f"{len(lines)}\n" + "".join(f"{line}\n" for line in lines)


class IntrospectionMiddleware:
    """Short-circuits introspection requests, passes everything else on"""

    def __init__(self, app: ASGIApp, query_key: str = DEFAULT_QUERY_KEY, enabled: bool = True):
        self.app = app
        self.query_key = query_key
        self.enabled = enabled

    def is_triggered(self, scope: Scope) -> bool:
        if not self.enabled or scope["type"] != "http":
            return False
        wanted = self.query_key.casefold()
        params = QueryParams(scope.get("query_string", b""))
        return any(key.casefold() == wanted for key in params.keys())

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not self.is_triggered(scope):
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        lines = describe_registrations(get_request_services(request))
        logger.info(f"Introspection requested for {request.url.path}: {len(lines)} services")
        response = PlainTextResponse(render_report(lines))
        await response(scope, receive, send)
