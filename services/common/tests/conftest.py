"""Test fixtures for common service tests."""

import os
from collections.abc import Generator
from unittest.mock import patch

import pytest


@pytest.fixture
def isolated_environment() -> Generator[None, None, None]:
    """Restore environment variables changed by a test."""
    with patch.dict(os.environ):
        yield
