"""Shared fixtures for the event_kit test suite."""

import pytest

from event_kit import create_registry
from event_kit._runtime import registry as registry_module


@pytest.fixture(autouse=True)
def fresh_default_registry(monkeypatch):
    """Give every test its own process-wide registry."""
    monkeypatch.setattr(registry_module, "_default_registry", None)
    yield


@pytest.fixture
def registry():
    return create_registry()


class Recorder:
    """Callable that records every value it is called with."""

    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def __call__(self, *args):
        self.calls.append(args[0] if args else None)
        return self.result

    @property
    def call_count(self):
        return len(self.calls)


@pytest.fixture
def recorder():
    return Recorder
