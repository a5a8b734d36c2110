"""Shared pytest fixtures for the signal scan test suite."""

from __future__ import annotations

import pytest

from signal_scan.core.config import PollerConfig
from tests.helpers import VirtualScheduler


@pytest.fixture()
def virtual_scheduler() -> VirtualScheduler:
    """Return a fresh virtual clock starting at t=0."""
    return VirtualScheduler()


@pytest.fixture()
def fast_config() -> PollerConfig:
    """Small, deterministic configuration for scheduler tests."""
    return PollerConfig(
        poll_interval_seconds=1.5,
        max_attempts=5,
        progress_tick_seconds=0.5,
        progress_step_min=2,
        progress_step_max=7,
        progress_ceiling=90,
    )
