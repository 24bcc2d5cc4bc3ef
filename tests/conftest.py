"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )


def utc(year, month, day, hour=0, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def monday():
    """Monday 2025-11-24 00:00 UTC (ISO week 2025-W48)."""
    return utc(2025, 11, 24)
