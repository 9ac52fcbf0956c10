"""
Pytest configuration and fixtures
"""

import pytest

from tests.test_helpers import RecordingAdapter, create_in_memory_tracing, create_test_service


@pytest.fixture
def adapter():
    """Recording adapter answering 200 OK"""
    return RecordingAdapter(content=b"ok")


@pytest.fixture
def service_setup(adapter):
    """HTTPService for http://svc with recording adapter and in-memory spans"""
    return create_test_service("http://svc", adapter=adapter)


@pytest.fixture
def service(service_setup):
    return service_setup[0]


@pytest.fixture
def span_exporter(service_setup):
    return service_setup[2]


@pytest.fixture
def tracing():
    """Standalone (provider, exporter) pair"""
    return create_in_memory_tracing()
