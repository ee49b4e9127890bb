# tests/integration/conftest.py
import pytest


def pytest_collection_modifyitems(items):
    """Mark everything collected from this directory as an integration test."""
    for item in items:
        if "integration" in item.path.parts:
            item.add_marker(pytest.mark.integration)
