"""Shared pytest fixtures."""
import time

import pytest


@pytest.fixture(autouse=True)
def utc_timezone(monkeypatch):
    """Pin local time to UTC so derived names are deterministic."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
