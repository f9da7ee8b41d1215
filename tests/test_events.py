import logging

from site_drift.events import Event, LoggingSink, RecordingSink


def test_recording_sink_keeps_order():
    sink = RecordingSink()
    sink.emit("crawl_started", url="https://docs.example/")
    sink.emit("page_failed", url="https://docs.example/x", reason="not found")

    assert sink.names() == ["crawl_started", "page_failed"]
    assert sink.of("page_failed") == [Event("page_failed", {"url": "https://docs.example/x", "reason": "not found"})]


def test_logging_sink_levels(caplog):
    log = logging.getLogger("site_drift.tests.sink")
    sink = LoggingSink(log)

    with caplog.at_level(logging.DEBUG, logger=log.name):
        sink.emit("crawl_finished", pages=3)
        sink.emit("page_failed", url="https://docs.example/x", reason="timeout")
        sink.emit("page_fetched", url="https://docs.example/")

    levels = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert levels == [
        (logging.INFO, "crawl_finished pages=3"),
        (logging.WARNING, "page_failed url='https://docs.example/x' reason='timeout'"),
        (logging.DEBUG, "page_fetched url='https://docs.example/'"),
    ]


def test_logging_sink_skips_disabled_levels(caplog):
    log = logging.getLogger("site_drift.tests.quiet")
    sink = LoggingSink(log)

    with caplog.at_level(logging.WARNING, logger=log.name):
        sink.emit("page_fetched", url="https://docs.example/")

    assert caplog.records == []
