import pytest

from event_bridge.core.models import Event
from event_bridge.core.targets import EventTarget


def test_from_wire_decodes_every_field():
    event = Event.from_wire(
        {"event": "ping", "source": {"kind": "Window", "label": "main"}, "id": "7", "payload": {"n": 1}}
    )
    assert event.event == "ping"
    assert event.source == EventTarget.window("main")
    assert event.id == 7
    assert event.payload == {"n": 1}


def test_missing_source_and_payload():
    event = Event.from_wire({"event": "ping", "id": 3})
    assert event.source.is_global
    assert event.payload is None


def test_missing_id_is_an_error():
    with pytest.raises(KeyError):
        Event.from_wire({"event": "ping"})


def test_to_wire_matches_host_shape():
    event = Event("x", EventTarget.webview("w"), 2, [1, 2])
    assert event.to_wire() == {
        "event": "x",
        "source": {"kind": "Webview", "label": "w"},
        "id": 2,
        "payload": [1, 2],
    }
