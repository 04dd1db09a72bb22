"""Shared fixtures for the viewability engine tests."""
import pytest

from adviewability.config import Settings
from adviewability.host.snapshot import SnapshotHost
from adviewability.monitor.scheduler import ManualScheduler
from adviewability.monitor.viewability_monitor import ViewabilityMonitor

from helpers import make_element, single_window_page


@pytest.fixture
def config() -> Settings:
    """Protocol defaults, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def visible_host() -> SnapshotHost:
    """A 300x250 ad fully inside a 1024x768 top window."""
    return SnapshotHost(single_window_page(make_element("ad", 100, 100, 300, 250)))


@pytest.fixture
def monitor(visible_host: SnapshotHost, scheduler: ManualScheduler, config: Settings) -> ViewabilityMonitor:
    return ViewabilityMonitor(visible_host, scheduler, config=config)
