import logging

from utils.logging import CorrelationIdFilter, configure_logging, normalize_correlation_id


def make_record():
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello %s", ("world",), None)


def test_filter_defaults_to_dash_outside_requests():
    rec = make_record()
    assert CorrelationIdFilter().filter(rec) is True
    assert rec.correlation_id == "-"


def test_filter_uses_request_correlation_id(app):
    rec = make_record()
    with app.test_request_context("/", headers={"X-Correlation-ID": "abc-123"}):
        app.preprocess_request()
        CorrelationIdFilter().filter(rec)
    assert rec.correlation_id == "abc-123"


def test_filter_respects_record_extra():
    rec = make_record()
    rec.correlation_id = "explicit"
    CorrelationIdFilter().filter(rec)
    assert rec.correlation_id == "explicit"


def test_normalize_correlation_id():
    assert normalize_correlation_id("trace.01_A-b") == "trace.01_A-b"
    assert len(normalize_correlation_id(None)) == 32
    assert normalize_correlation_id("bad value") != "bad value"


def test_configure_logging_installs_single_formatted_handler(monkeypatch):
    captured = {}
    # the real basicConfig(force=True) would also tear down pytest's capture handlers
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

    configure_logging("warning")

    assert captured["level"] == logging.WARNING
    assert captured["force"] is True
    (handler,) = captured["handlers"]
    rec = make_record()
    assert handler.filter(rec)
    assert handler.format(rec).endswith("| INFO     | test | - | hello world")
