"""JSON log lines: request id correlation and structured extras."""

import io
import json
import logging
from decimal import Decimal

import pytest

from fieldops.core.logging import setup_logging
from fieldops.core.request_id import set_request_id
from fieldops.core.settings import settings


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    setup_logging("DEBUG", stream=stream)
    yield stream
    # état installé par fieldops.main à l’import
    setup_logging(settings.LOG_LEVEL)
    set_request_id(None)


def lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_conflict_event_carries_request_id_and_document_fields(log_stream):
    set_request_id("req-77")

    logging.getLogger("fieldops.documents").warning(
        "reference conflict", extra={"kind": "facture", "reference": "FAC-2025-0004", "attempt": 2}
    )

    [line] = lines(log_stream)
    assert line["app"] == "fieldops"
    assert line["level"] == "WARNING"
    assert line["logger"] == "fieldops.documents"
    assert line["request_id"] == "req-77"
    assert (line["kind"], line["reference"], line["attempt"]) == ("facture", "FAC-2025-0004", 2)


def test_unknown_extras_are_dropped_and_decimals_are_strings(log_stream):
    logging.getLogger("fieldops.devis").info(
        "devis status changed", extra={"new_status": "valide_dg", "entity_id": Decimal("12.50"), "secret": "x"}
    )

    [line] = lines(log_stream)
    assert line["request_id"] == "-"
    assert line["new_status"] == "valide_dg"
    assert line["entity_id"] == "12.50"
    assert "secret" not in line


def test_uvicorn_shares_the_json_handler(log_stream):
    logging.getLogger("uvicorn.error").info("Application startup complete.")

    [line] = lines(log_stream)
    assert line["logger"] == "uvicorn.error"
    assert line["msg"] == "Application startup complete."
