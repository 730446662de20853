"""
Pytest configuration and shared fixtures for consulkit tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from consulkit.adapters.mock import MockAdapter
from consulkit.sdk.client import Config, ConsulClient


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_adapter() -> MockAdapter:
    """Empty mock adapter; tests register responses with ``add``."""
    return MockAdapter()


@pytest.fixture
def config(mock_adapter: MockAdapter) -> Config:
    """Config pointing at the local agent, served by ``mock_adapter``."""
    return Config(address="http://127.0.0.1:8500", adapter=mock_adapter)


@pytest.fixture
def client(config: Config) -> ConsulClient:
    return ConsulClient(config)


# Hypothesis settings for property-based tests
from hypothesis import settings, Verbosity

# Register custom profiles
settings.register_profile("consulkit", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("consulkit-ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("consulkit-dev", max_examples=10, verbosity=Verbosity.verbose)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "consulkit"))
