#!/usr/bin/env python3

"""
Application Builder

Collects the request pipeline declared by ``Startup.configure`` and turns it
into a FastAPI application. Middleware keeps the order it was added in: the
per-request scope stage always runs first, then each ``use`` in turn.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from fastapi import APIRouter, FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware import Middleware

from .request_services import RequestServicesMiddleware
from .service_provider import ScopedServiceProvider

logger = logging.getLogger(__name__)


class ApplicationBuilder:
    """Ordered description of the request pipeline"""

    def __init__(self, application_services: ScopedServiceProvider, title: str = "scopegraft"):
        self.application_services = application_services
        self.title = title
        self._middleware: List[Middleware] = []
        self._routers: List[APIRouter] = []
        self._mounts: List[Tuple[str, Path]] = []
        self._exception_handlers: Dict[Any, Callable] = {}
        self._debug = False

    def use(self, middleware_class: type, **options: Any) -> 'ApplicationBuilder':
        self._middleware.append(Middleware(middleware_class, **options))
        logger.debug(f"Pipeline stage {len(self._middleware)}: {middleware_class.__name__}")
        return self

    def use_developer_exception_page(self) -> 'ApplicationBuilder':
        """Render tracebacks for unhandled errors"""
        self._debug = True
        return self

    def use_exception_handler(self, handler: Callable) -> 'ApplicationBuilder':
        """Render unhandled errors with ``handler(request, exc)``"""
        self._exception_handlers[Exception] = handler
        return self

    def use_static_files(self, directory: Union[str, Path], path: str = "/") -> 'ApplicationBuilder':
        self._mounts.append((path, Path(directory)))
        return self

    def map_routes(self, router: APIRouter) -> 'ApplicationBuilder':
        self._routers.append(router)
        return self

    @property
    def middleware(self) -> List[Middleware]:
        return [
            Middleware(RequestServicesMiddleware, scope_factory=self.application_services),
            *self._middleware,
        ]

    def build(self, lifespan: Optional[Callable] = None) -> FastAPI:
        app = FastAPI(
            title=self.title,
            debug=self._debug,
            middleware=self.middleware,
            exception_handlers=dict(self._exception_handlers),
            lifespan=lifespan,
        )
        for router in self._routers:
            app.include_router(router)
        # Mounted last so routes take precedence over files
        for path, directory in self._mounts:
            app.mount(path, StaticFiles(directory=str(directory)), name=f"static:{path}")
        app.state.services = self.application_services
        logger.info(f"Application built: {len(self.middleware)} middleware, "
                    f"{len(self._routers)} routers, {len(self._mounts)} static mounts")
        return app
