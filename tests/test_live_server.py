from stepwalker import EventDispatcher, LiveMapServer, Location, PathEvent, PositionEvent
from stepwalker.live_server import event_message


def test_position_message():
    assert event_message(PositionEvent(1.0, 2.0)) == {
        "type": "position", "data": {"lat": 1.0, "lon": 2.0}}


def test_path_message():
    message = event_message(PathEvent(False, [Location(1.0, 2.0, 3.0)]))

    assert message == {"type": "path", "data": {
        "is_calculated": False, "points": [{"lat": 1.0, "lon": 2.0}]}}


def test_unknown_event_ignored():
    assert event_message(object()) is None


def test_events_without_clients_are_dropped(mocker):
    server = LiveMapServer(http_port=18080, ws_port=18765)
    send = mocker.spy(server, "_send_message")
    events = EventDispatcher()
    server.attach(events)

    events.send(PositionEvent(1.0, 2.0))
    server.send_log("hello")

    assert send.call_count == 2
    assert server.connected_clients == set()
