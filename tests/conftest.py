#!/usr/bin/env python3

"""
Test Configuration and Fixtures

Shared fixtures: an external container, a hosting environment rooted in a
temporary content root, the composition bridge and a built web host.
"""

import logging

import pytest
import pytest_asyncio
import httpx
from fastapi.testclient import TestClient

from scopegraft.configuration import ConfigurationBuilder
from scopegraft.diagnostics.logger_factory import LoggerFactory
from scopegraft.hosting import CompositionBridge, create_environment
from scopegraft.hosting.startup import Startup
from scopegraft.hosting.web_host import WebHostBuilder

from tests.test_utils import build_test_container, write_content_root


@pytest.fixture
def content_root(tmp_path):
    """Temporary content root with settings files and a wwwroot"""
    return write_content_root(tmp_path)


@pytest.fixture
def environment(content_root):
    return create_environment("scopegraft-tests", "Development", content_root)


@pytest.fixture
def production_environment(content_root):
    return create_environment("scopegraft-tests", "Production", content_root)


@pytest.fixture
def configuration(environment):
    return (
        ConfigurationBuilder()
        .set_base_path(environment.content_root_path)
        .add_json_file("appsettings.json")
        .add_json_file(f"appsettings.{environment.environment_name}.json", optional=True)
        .build()
    )


@pytest.fixture
def logger_factory():
    factory = LoggerFactory()
    yield factory
    factory.dispose()


@pytest.fixture
def external_container(logger_factory):
    """Process-wide container built outside the host"""
    container = build_test_container(logger_factory)
    yield container
    container.dispose()


@pytest.fixture
def bridge(external_container, environment, configuration):
    return CompositionBridge(external_container, environment, configuration)


@pytest.fixture
def web_host(bridge):
    host = WebHostBuilder(bridge).use_startup(Startup).build()
    yield host
    host.dispose()


@pytest.fixture
def client(web_host):
    with TestClient(web_host.app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def async_client(web_host):
    transport = httpx.ASGITransport(app=web_host.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Startup reconfigures the root logger; put it back after each test"""
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)


# Markers for different test types
def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line("markers", "container: Container and scope tests")
    config.addinivalue_line("markers", "introspection: Registration introspection tests")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location and name"""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "e2e" in path:
            item.add_marker(pytest.mark.e2e)

        if "scope" in item.name or "container" in item.name:
            item.add_marker(pytest.mark.container)
        if "introspection" in item.name or "debug" in item.name:
            item.add_marker(pytest.mark.introspection)
