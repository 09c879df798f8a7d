"""Tests for structured logging."""

import json
import logging

from snapvault.core.logging import CloudLoggingFormatter, object_key_context


def make_record(msg="Upload target issued", **extra):
    record = logging.LogRecord("snapvault.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_single_line_json():
    output = CloudLoggingFormatter().format(make_record(size_bytes=42))

    assert "\n" not in output
    entry = json.loads(output)
    assert entry["severity"] == "INFO"
    assert entry["message"] == "Upload target issued"
    assert entry["logger"] == "snapvault.test"
    assert entry["size_bytes"] == 42


def test_includes_object_key_from_context():
    token = object_key_context.set("uploads/abc_1x1.png")
    try:
        entry = json.loads(CloudLoggingFormatter().format(make_record()))
    finally:
        object_key_context.reset(token)

    assert entry["object_key"] == "uploads/abc_1x1.png"


def test_includes_exception_details():
    try:
        raise RuntimeError("signer offline")
    except RuntimeError:
        import sys

        record = make_record()
        record.exc_info = sys.exc_info()

    entry = json.loads(CloudLoggingFormatter().format(record))

    assert entry["exception_type"] == "RuntimeError"
    assert entry["exception_message"] == "signer offline"
    assert "Traceback" in entry["exception"]
