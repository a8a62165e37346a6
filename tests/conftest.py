"""Shared fixtures for the gridcalc test suite."""

from __future__ import annotations

import pytest

from gridcalc.cells import Sheet
from gridcalc.logging import set_log_dir


@pytest.fixture(autouse=True)
def _no_event_sink():
    """Keep the module-level event sink from leaking between tests."""
    set_log_dir(None)
    yield
    set_log_dir(None)


@pytest.fixture
def sheet() -> Sheet:
    """A default sheet holding a 2x2 block of numbers in A1:B2."""
    return Sheet.from_mapping({"A1": "1", "B1": "2", "A2": "3", "B2": "4"})
