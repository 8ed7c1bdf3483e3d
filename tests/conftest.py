from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from event_bridge.core.event_api import set_default_client  # noqa: E402
from event_bridge.core.targets import EventTarget  # noqa: E402
from event_bridge.testing import MockHost  # noqa: E402


@pytest.fixture()
def host() -> MockHost:
    return MockHost()


@pytest.fixture()
def main_window(host: MockHost):
    return host.connect(EventTarget.window("main"))


@pytest.fixture()
def client(main_window):
    return main_window.client()


@pytest.fixture(autouse=True)
def _reset_default_client():
    yield
    set_default_client(None)


class Recorder:
    """Handler double that remembers every delivered event."""

    def __init__(self) -> None:
        self.events = []

    def __call__(self, event) -> None:
        self.events.append(event)

    @property
    def payloads(self):
        return [event.payload for event in self.events]


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()
