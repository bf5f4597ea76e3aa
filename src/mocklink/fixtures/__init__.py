"""Fixture file models and loader for mocklink.yaml."""

from mocklink.fixtures.models import (
    ErrorEntry,
    FixtureFile,
    MockEntry,
    RequestEntry,
    SimulatedNetworkError,
)
from mocklink.fixtures.parser import FixtureError, load_fixtures

__all__ = [
    "ErrorEntry",
    "FixtureError",
    "FixtureFile",
    "MockEntry",
    "RequestEntry",
    "SimulatedNetworkError",
    "load_fixtures",
]
