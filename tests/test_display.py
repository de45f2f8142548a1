import logging

from study_buddy.display import DIAGRAMS, InMemoryDisplayChannel, resolve_diagram


def test_drain_returns_messages_in_order_and_empties():
    channel = InMemoryDisplayChannel()
    channel.publish({"type": "show_image"})
    channel.publish({"type": "close_image"})
    assert [m["type"] for m in channel.drain()] == ["show_image", "close_image"]
    assert channel.drain() == []


def test_full_buffer_warns_when_dropping(caplog):
    channel = InMemoryDisplayChannel(maxlen=2)
    channel.publish({"type": "close_image"})
    channel.publish({"type": "show_image"})

    with caplog.at_level(logging.WARNING, logger="study_buddy.display"):
        channel.publish({"type": "show_image"})

    assert len(channel.drain()) == 2
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "close_image" in warnings[0]


def test_resolve_diagram_falls_back_to_cell():
    assert resolve_diagram("NUCLEUS") == DIAGRAMS["nucleus"]
    assert resolve_diagram("golgi") == DIAGRAMS["cell"]
