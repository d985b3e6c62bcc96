"""JSON log lines carry domain extras; setup_logging does not stack handlers."""

import json
import logging

from portfolio_api.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "portfolio_api.test", logging.WARNING, __file__, 1, "Deleted %s", ("Project",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_has_core_fields():
    line = json.loads(JSONFormatter().format(_record()))
    assert line["level"] == "WARNING"
    assert line["logger"] == "portfolio_api.test"
    assert line["message"] == "Deleted Project"
    assert "timestamp" in line


def test_domain_extras_copied_when_present():
    line = json.loads(JSONFormatter().format(_record(resource="Project", resource_id="7")))
    assert line["resource"] == "Project"
    assert line["resource_id"] == "7"
    assert "image_name" not in line


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("DEBUG", "text")
        setup_logging("DEBUG", "json")
        ours = [h for h in root.handlers if h.get_name() == "portfolio_api"]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, JSONFormatter)
        assert root.level == logging.DEBUG
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(level)
