"""
Tests unitarios para el logging estructurado.
"""
import json
import logging

from infrastructure.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    bind_request,
    get_correlation_id,
    reset_request,
    saga_step,
)


def make_record(message="paso fallido", **extra):
    record = logging.LogRecord(
        name="core.saga",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_includes_request_and_saga_step():
    tokens = bind_request("cid-123", "POST", "/api/farmers/link")
    try:
        with saga_step("farmer_assignment", "ActivateProfileCommand"):
            line = StructuredFormatter().format(make_record(table="profiles"))
    finally:
        reset_request(tokens)

    data = json.loads(line)
    assert data["message"] == "paso fallido"
    assert data["service"] == "agrifusion-api"
    assert data["correlation_id"] == "cid-123"
    assert data["request"] == {"method": "POST", "path": "/api/farmers/link"}
    assert data["saga"] == {
        "saga": "farmer_assignment",
        "step": "ActivateProfileCommand",
        "phase": "execute",
    }
    assert data["extra"] == {"table": "profiles"}


def test_context_is_cleared_after_request_and_step():
    tokens = bind_request("cid-123", "GET", "/health")
    with saga_step("s", "step"):
        pass
    reset_request(tokens)

    data = json.loads(StructuredFormatter().format(make_record()))

    assert get_correlation_id() is None
    assert "saga" not in data
    assert "correlation_id" not in data


def test_human_readable_marks_undo_phase():
    with saga_step("farmer_assignment", "AssignConsultantCommand", phase="undo"):
        line = HumanReadableFormatter().format(make_record("rollback"))

    assert "<farmer_assignment.AssignConsultantCommand:undo>" in line
    assert line.endswith("core.saga: rollback")
