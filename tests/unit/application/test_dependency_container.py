from unittest.mock import Mock

import pytest

from pastebox.application.dependency_container import (
    DependencyContainer,
    DependencyNotFoundError,
)


class Service:
    pass


class TestDependencyContainer:
    def test_singleton_is_shared(self):
        container = DependencyContainer()
        instance = Service()
        container.register_singleton(Service, instance)

        assert container.resolve(Service) is instance
        assert container.resolve(Service) is instance

    def test_transient_builds_new_instances(self):
        container = DependencyContainer()
        container.register_transient(Service, Service)

        assert container.resolve(Service) is not container.resolve(Service)

    def test_override_takes_precedence(self):
        container = DependencyContainer()
        container.register_singleton(Service, Service())
        fake = Mock()
        container.override(Service, fake)

        assert container.resolve(Service) is fake

        container.clear_overrides()
        assert container.resolve(Service) is not fake

    def test_unregistered_raises(self):
        with pytest.raises(DependencyNotFoundError):
            DependencyContainer().resolve(Service)

    def test_is_registered(self):
        container = DependencyContainer()
        assert container.is_registered(Service) is False

        container.register_transient(Service, Service)
        assert container.is_registered(Service) is True
