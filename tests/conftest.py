"""
Shared pytest fixtures and configuration for the pastebox test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Fixtures for stores, configs and Flask test clients
- Automatic markers based on test location
"""

import random
from datetime import timedelta

import pytest
from hypothesis import HealthCheck, Phase, settings

from pastebox.app_factory import SWEEPER_EXTENSION, create_app
from pastebox.config.settings import ServiceConfig
from pastebox.domain.object_storage.services import NameGenerator, ObjectStore
from pastebox.domain.object_storage.value_objects import RetentionPolicy
from pastebox.infrastructure.local_object_storage_repository import LocalObjectStorageRepository

from tests.fixtures.memory_repository import InMemoryObjectStorageRepository

settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")


VALID_TOKEN = "valid-token-123"
OTHER_TOKEN = "second-token-456"
CLI_AGENT = "dingo_client"


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def seeded_generator() -> NameGenerator:
    """Name generator with a fixed seed for reproducible names."""
    return NameGenerator(random.Random(1234))


@pytest.fixture
def memory_repository() -> InMemoryObjectStorageRepository:
    return InMemoryObjectStorageRepository()


@pytest.fixture
def memory_store(memory_repository, seeded_generator) -> ObjectStore:
    return ObjectStore(memory_repository, seeded_generator)


@pytest.fixture
def local_repository(tmp_path) -> LocalObjectStorageRepository:
    return LocalObjectStorageRepository(str(tmp_path / "upload"))


@pytest.fixture
def local_store(local_repository, seeded_generator) -> ObjectStore:
    return ObjectStore(local_repository, seeded_generator)


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def service_config(tmp_path) -> ServiceConfig:
    return ServiceConfig(
        tokens=(VALID_TOKEN, OTHER_TOKEN),
        upload_path=str(tmp_path / "upload"),
        domain="https://paste.example.com",
        retention=RetentionPolicy(timedelta(hours=48)),
        port=8000,
    )


@pytest.fixture
def flask_app(service_config):
    app = create_app(service_config)
    app.config["TESTING"] = True
    yield app
    app.extensions[SWEEPER_EXTENSION].stop()


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/e2e/* -> @pytest.mark.e2e
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path or "\\e2e\\" in test_path:
            item.add_marker(pytest.mark.e2e)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
