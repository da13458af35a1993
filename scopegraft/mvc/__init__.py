"""
MVC Module

The request-pipeline services the host registers and its default controller.
"""

from .host_services import (
    RequestContext,
    ControllerActivator,
    add_mvc,
    Activate
)
from .home_controller import (
    HomeController,
    RootObjectInfo,
    create_home_router
)

__all__ = [
    "RequestContext",
    "ControllerActivator",
    "add_mvc",
    "Activate",
    "HomeController",
    "RootObjectInfo",
    "create_home_router"
]
