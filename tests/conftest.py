"""
Global pytest configuration and fixtures for callwire tests
"""
import logging

import pytest

from callwire.rpc import LocalTransport

from targets import CalculatorService, DefaultsService

logging.getLogger("callwire").setLevel(logging.DEBUG)


@pytest.fixture
def calculator_service():
    return CalculatorService()


@pytest.fixture
def defaults_service():
    return DefaultsService()


@pytest.fixture
def local_transport(calculator_service):
    """In-process transport speaking the same bytes as the HTTP endpoint."""
    return LocalTransport(calculator_service)


def _request(function_name, function_args=None):
    return {"functionName": function_name, "functionArgs": dict(function_args or {})}


@pytest.fixture
def make_request():
    """Request dict the way it arrives from the wire."""
    return _request


def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line("markers", "integration: HTTP round-trip tests")
