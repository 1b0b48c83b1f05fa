import logging

from app.services.notifier import LoggingNotifier, RecordingNotifier


def test_logging_notifier_logs_event(caplog):
    with caplog.at_level(logging.INFO, logger="app.services.notifier"):
        LoggingNotifier().publish("issue_created", {"issue_id": "abc"})
    assert "issue_created" in caplog.text
    assert "abc" in caplog.text


def test_recording_notifier_keeps_order():
    notifier = RecordingNotifier()
    notifier.publish("a", {"n": 1})
    notifier.publish("b", {"n": 2})
    assert notifier.events == [("a", {"n": 1}), ("b", {"n": 2})]
