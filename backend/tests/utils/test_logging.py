import json
import logging

from callpulse.utils.logging import _JSONFormatter, session_logger


def test_session_logger_tags_records(caplog) -> None:
    log = session_logger("ab12cd34")
    with caplog.at_level(logging.INFO, logger="callpulse.session"):
        log.info("started")

    record = caplog.records[-1]
    assert record.getMessage() == "[S ab12cd34] started"
    assert record.session == "ab12cd34"

    payload = json.loads(_JSONFormatter().format(record))
    assert payload["session"] == "ab12cd34"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "callpulse.session"


def test_formatter_includes_exceptions() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.getLogger("callpulse").makeRecord(
            "callpulse", logging.ERROR, __file__, 1, "failed", (), exc_info=__import__("sys").exc_info(),
        )
    payload = json.loads(_JSONFormatter().format(record))
    assert "session" not in payload
    assert "ValueError: boom" in payload["exception"]
