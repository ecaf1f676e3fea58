"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from devnet.config import runtime
from tests.helpers.devnet_fakes import RecordingSleep


@pytest.fixture(autouse=True)
def reset_runtime_state(monkeypatch):
    """Keep .env files on the developer machine out of configuration tests."""
    monkeypatch.setattr(runtime, "_DOTENV_CANDIDATES", ())
    runtime._DEFAULT_VALUES = None
    yield
    runtime._DEFAULT_VALUES = None


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()
