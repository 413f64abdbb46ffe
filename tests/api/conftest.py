"""Pytest fixtures for API tests.

Provides test clients built from explicit configuration so tests never
depend on a vicsedi.yaml in the working directory.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from vicsedi.api.main import create_app
from vicsedi.cli.config import EDIConfig, VicsEdiConfig


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient for an app with default configuration."""
    with TestClient(create_app(VicsEdiConfig())) as test_client:
        yield test_client


@pytest.fixture
def client_5010() -> Generator[TestClient, None, None]:
    """TestClient whose configured default dialect is 5010."""
    config = VicsEdiConfig(edi=EDIConfig(default_dialect="5010"))
    with TestClient(create_app(config)) as test_client:
        yield test_client
