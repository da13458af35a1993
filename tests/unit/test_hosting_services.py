#!/usr/bin/env python3

"""
Hosting Unit Tests

Composition bridge, hosting environment and the host's service collection.
"""

import pytest

from scopegraft.configuration import ConfigurationRoot
from scopegraft.container import ConfigurationError, ContainerBuilder, Lifetime
from scopegraft.hosting import (
    CompositionBridge,
    ServiceCollection,
    ServiceDescriptor,
    create_environment,
    discover_web_root,
)
from tests.test_utils import DisposableResource, Greeting, RequestGreeting, build_test_container


@pytest.mark.unit
class TestCompositionBridge:
    """The hand-off from the composition root to the host"""

    def test_bridge_carries_all_three_values(self, external_container, environment, configuration):
        bridge = CompositionBridge(external_container, environment, configuration)

        assert bridge.container is external_container
        assert bridge.environment is environment
        assert bridge.configuration is configuration

    def test_bridge_requires_container(self, environment):
        with pytest.raises(ConfigurationError):
            CompositionBridge(None, environment)

    def test_bridge_requires_environment(self, external_container):
        with pytest.raises(ConfigurationError):
            CompositionBridge(external_container, None)

    def test_missing_configuration_becomes_empty_root(self, external_container, environment):
        bridge = CompositionBridge(external_container, environment)

        assert isinstance(bridge.configuration, ConfigurationRoot)
        assert len(bridge.configuration) == 0

    def test_bridge_is_immutable(self, bridge):
        with pytest.raises(Exception):
            bridge.container = build_test_container()


@pytest.mark.unit
class TestHostingEnvironment:
    """Environment names and content root discovery"""

    def test_environment_checks_are_case_insensitive(self, content_root):
        environment = create_environment("app", "development", content_root)

        assert environment.is_development()
        assert not environment.is_production()
        assert environment.is_environment("DEVELOPMENT")

    def test_web_root_is_set_when_present(self, content_root):
        environment = create_environment("app", "Production", content_root)

        assert environment.content_root_path == content_root.resolve()
        assert environment.web_root_path == content_root.resolve() / "wwwroot"

    def test_web_root_is_none_when_absent(self, tmp_path):
        environment = create_environment("app", "Staging", tmp_path)

        assert environment.is_staging()
        assert environment.web_root_path is None

    def test_discover_web_root_walks_up(self, content_root):
        nested = content_root / "scopegraft" / "mvc"
        nested.mkdir(parents=True)

        assert discover_web_root(nested) == content_root.resolve()

    def test_discover_web_root_fails_without_wwwroot(self, tmp_path):
        nested = tmp_path / "empty"
        nested.mkdir()

        with pytest.raises(ConfigurationError):
            discover_web_root(nested)

    def test_environment_is_frozen(self, environment):
        with pytest.raises(Exception):
            environment.environment_name = "Production"


@pytest.mark.unit
class TestServiceCollection:
    """The host's own registration model"""

    def test_add_methods_record_lifetimes(self):
        services = ServiceCollection()
        services.add_singleton(Greeting).add_scoped(DisposableResource).add_transient(Greeting, RequestGreeting)

        lifetimes = [descriptor.lifetime for descriptor in services]

        assert lifetimes == [Lifetime.SINGLETON, Lifetime.SCOPED, Lifetime.TRANSIENT]
        assert len(services) == 3
        assert services.contains(DisposableResource)

    def test_implementation_defaults_to_service_type(self):
        services = ServiceCollection().add_scoped(Greeting)

        assert next(iter(services)).implementation_type is Greeting

    def test_descriptor_needs_exactly_one_activator(self):
        with pytest.raises(ConfigurationError):
            ServiceDescriptor(Greeting, Lifetime.SCOPED)
        with pytest.raises(ConfigurationError):
            ServiceDescriptor(Greeting, Lifetime.SCOPED, implementation_type=Greeting,
                              factory=lambda scope: Greeting())

    def test_instance_descriptor_must_be_singleton(self):
        with pytest.raises(ConfigurationError):
            ServiceDescriptor(Greeting, Lifetime.SCOPED, instance=Greeting())

    def test_duplicate_singletons_are_rejected(self):
        services = ServiceCollection().add_singleton(Greeting).add_instance(Greeting, Greeting())

        with pytest.raises(ConfigurationError):
            services.validate()

    def test_duplicate_scoped_registrations_are_allowed(self):
        services = ServiceCollection().add_scoped(Greeting).add_scoped(Greeting, RequestGreeting)

        services.validate()

    def test_descriptors_register_into_a_scope(self):
        greeting = Greeting("instance")
        services = (
            ServiceCollection()
            .add_instance(Greeting, greeting)
            .add_scoped(DisposableResource, factory=lambda scope: DisposableResource())
        )
        builder = ContainerBuilder()
        for descriptor in services:
            descriptor.register_into(builder)
        container = builder.build()

        with container.begin_lifetime_scope() as scope:
            assert scope.resolve(Greeting) is greeting
            assert scope.resolve(DisposableResource) is scope.resolve(DisposableResource)
