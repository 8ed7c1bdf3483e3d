import pytest

from event_bridge.core.event_topics import ReservedEvent
from event_bridge.core.targets import EventTarget
from event_bridge.testing import MockHost


@pytest.mark.asyncio
async def test_events_travel_between_surfaces():
    host = MockHost()
    main = host.connect(EventTarget.window("main")).client()
    settings = host.connect(EventTarget.webview("settings")).client()
    seen = []

    await main.listen("settings:changed", lambda e: seen.append(("main", e.source, e.payload)))
    await settings.listen("settings:changed", lambda e: seen.append(("settings", e.source, e.payload)))

    await settings.emit("settings:changed", {"theme": "dark"})

    assert seen == [
        ("main", EventTarget.webview("settings"), {"theme": "dark"}),
        ("settings", EventTarget.webview("settings"), {"theme": "dark"}),
    ]


@pytest.mark.asyncio
async def test_targeted_emit_reaches_only_the_named_surface():
    host = MockHost()
    main_conn = host.connect(EventTarget.window("main"))
    other_conn = host.connect(EventTarget.window("other"))
    main, other = main_conn.client(), other_conn.client()
    seen = []

    await main.listen("refresh", lambda e: seen.append("main"), {"target": {"kind": "window", "label": "main"}})
    await other.listen("refresh", lambda e: seen.append("other"), {"target": {"kind": "window", "label": "other"}})

    await main.emit("refresh", None, {"target": {"kind": "window", "label": "other"}})

    assert seen == ["other"]


@pytest.mark.asyncio
async def test_close_requested_handshake():
    host = MockHost()
    window = host.connect(EventTarget.window("main")).client()
    closing = []

    async def on_close(event):
        closing.append(event.event)
        await window.emit("app:cleanup-done", {"label": "main"})

    done = []
    await window.once(ReservedEvent.WINDOW_CLOSE_REQUESTED, on_close)
    await window.listen("app:cleanup-done", lambda e: done.append(e.payload))

    await host.emit_from_host(ReservedEvent.WINDOW_CLOSE_REQUESTED)
    await host.emit_from_host(ReservedEvent.WINDOW_CLOSE_REQUESTED)
    await window.flush_cleanup()

    assert closing == ["tauri://close-requested"]
    assert done == [{"label": "main"}]
    assert host.subscription_count(ReservedEvent.WINDOW_CLOSE_REQUESTED) == 0
