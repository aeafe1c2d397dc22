import json
import logging

from dictation.logging import setup_logging


def _emit(message, **extra):
    root = setup_logging()
    handler = root.handlers[0]
    record = logging.LogRecord("dictation.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(handler.formatter.format(record))


def test_log_records_carry_service_name(monkeypatch):
    monkeypatch.setenv("DD_SERVICE", "dictation-chunk-worker")

    payload = _emit("Chunk accepted", chunk_id=7)

    assert payload["service"] == "dictation-chunk-worker"
    assert payload["message"] == "Chunk accepted"
    assert payload["chunk_id"] == 7


def test_log_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert setup_logging().level == logging.WARNING

    monkeypatch.setenv("LOG_LEVEL", "nonsense")
    assert setup_logging().level == logging.INFO
