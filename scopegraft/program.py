#!/usr/bin/env python3

"""
Composition Root

Builds the process-wide container before, and independently of, the web host,
then hands it to the host through a ``CompositionBridge``. The host grafts its
own services onto that container as a child scope.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Union

from fastapi import FastAPI

from .configuration import ConfigurationBuilder, ConfigurationRoot
from .container import Container, ContainerBuilder, Lifetime
from .diagnostics.logger_factory import ILogger, Logger, LoggerFactory, LoggingSettings
from .domain import RootObject
from .hosting.bridge import CompositionBridge
from .hosting.environment import DEVELOPMENT, HostingEnvironment, create_environment
from .hosting.startup import Startup
from .hosting.web_host import WebHost, WebHostBuilder

logger = logging.getLogger(__name__)

APPLICATION_NAME = "scopegraft"
ENVIRONMENT_VARIABLE_PREFIX = "SCOPEGRAFT_"


def build_configuration(environment: HostingEnvironment) -> ConfigurationRoot:
    return (
        ConfigurationBuilder()
        .set_base_path(environment.content_root_path)
        .add_json_file("appsettings.json", optional=False)
        .add_json_file(f"appsettings.{environment.environment_name}.json", optional=True)
        .add_environment_variables(ENVIRONMENT_VARIABLE_PREFIX)
        .build()
    )


def build_external_container(logger_factory: LoggerFactory) -> Container:
    """The process-wide container; it knows nothing about the web host"""
    builder = ContainerBuilder()
    builder.register_instance(logger_factory)
    builder.register_generic(Logger, ILogger)
    builder.register_type(RootObject, lifetime=Lifetime.SINGLETON)
    return builder.build()


def create_bridge(environment_name: str = DEVELOPMENT,
                  content_root: Union[str, Path, None] = None) -> CompositionBridge:
    """Everything the host needs, built before the host exists"""
    environment = create_environment(APPLICATION_NAME, environment_name, content_root)
    configuration = build_configuration(environment)

    logger_factory = LoggerFactory().add_console(
        configuration.get_section("Logging").bind(LoggingSettings)
    )
    container = build_external_container(logger_factory)
    logger.info(f"External container ready for {environment.application_name} "
                f"({environment.environment_name}, content root {environment.content_root_path})")
    return CompositionBridge(container, environment, configuration)


def create_host(environment_name: str = DEVELOPMENT,
                content_root: Union[str, Path, None] = None) -> WebHost:
    return WebHostBuilder(create_bridge(environment_name, content_root)).use_startup(Startup).build()


def create_app() -> FastAPI:
    """Application factory for ``uvicorn --factory scopegraft.program:create_app``"""
    return create_host().app


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the scopegraft web host")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument("--environment", default=DEVELOPMENT,
                        help="Development, Staging or Production")
    parser.add_argument("--content-root", default=None,
                        help="Directory holding appsettings.json and wwwroot (discovered if omitted)")
    args = parser.parse_args(argv)

    host = create_host(args.environment, args.content_root)
    host.run(args.host, args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
