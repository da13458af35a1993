#!/usr/bin/env python3

"""
Home Controller

Default routes of the host. Handlers receive a controller activated from the
request scope, so anything registered in the external container, the grafted
host scope or the request scope can be injected.
"""

import logging
import time

import aiofiles
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from ..diagnostics.logger_factory import ILogger
from ..domain import RootObject
from ..hosting.environment import HostingEnvironment
from ..hosting.request_services import Resolve, get_request_services
from .host_services import Activate, RequestContext

logger = logging.getLogger(__name__)

ERROR_PAGE = """
<html>
    <head><title>Error</title></head>
    <body>
        <h1>Error.</h1>
        <h2>An error occurred while processing your request.</h2>
    </body>
</html>
"""


class RootObjectInfo(BaseModel):
    root_object_id: str
    root_object_type: str
    request_id: str


class HomeController:
    def __init__(self,
                 root: RootObject,
                 context: RequestContext,
                 environment: HostingEnvironment,
                 log: 'ILogger[HomeController]'):
        self.root = root
        self.context = context
        self.environment = environment
        self.log = log

    async def index(self) -> str:
        """Serve wwwroot/index.html, or a generated page when there is none"""
        self.log.info(f"Index requested ({self.context.request_id})")
        web_root = self.environment.web_root_path
        index_file = web_root / "index.html" if web_root else None
        if index_file is not None and index_file.exists():
            async with aiofiles.open(index_file, "r") as f:
                return await f.read()
        return f"""
        <html>
            <head><title>{self.environment.application_name}</title></head>
            <body>
                <h1>{self.environment.application_name}</h1>
                <p>Root object: {self.root.id}</p>
                <p>Add <code>?DEBUG</code> to any URL to list the registered services.</p>
            </body>
        </html>
        """

    def root_object(self) -> RootObjectInfo:
        return RootObjectInfo(
            root_object_id=self.root.id,
            root_object_type=type(self.root).__qualname__,
            request_id=self.context.request_id,
        )


async def render_error_page(request: Request, exc: Exception) -> HTMLResponse:
    """Exception handler used outside Development"""
    logger.error(f"Unhandled error on {request.url.path}: {exc!r}")
    return HTMLResponse(ERROR_PAGE, status_code=500)


class HomeRouter:
    """Router class for the default routes"""

    def __init__(self):
        self.router = APIRouter(tags=["home"])
        self._register_routes()

    def _register_routes(self) -> None:

        @self.router.get("/", response_class=HTMLResponse)
        @self.router.get("/home/index", response_class=HTMLResponse)
        async def index(controller: HomeController = Activate(HomeController)):
            return await controller.index()

        @self.router.get("/home/error", response_class=HTMLResponse)
        async def error():
            return ERROR_PAGE

        @self.router.get("/api/root", response_model=RootObjectInfo)
        def root_object(controller: HomeController = Activate(HomeController)):
            return controller.root_object()

        @self.router.get("/health")
        def health_check(request: Request, environment: HostingEnvironment = Resolve(HostingEnvironment)):
            services = get_request_services(request)
            return {
                "status": "healthy",
                "timestamp": time.time(),
                "application": environment.application_name,
                "environment": environment.environment_name,
                "registrations": len(services.registrations()),
            }


def create_home_router() -> APIRouter:
    return HomeRouter().router
