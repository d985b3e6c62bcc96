"""Structured Logging — JSON lines for deployments, plain text for local runs.

Invariants:
    - Every JSON line carries timestamp (UTC), level, logger and message
    - Domain extras (resource, resource_id, operation, image_name, error_code, path)
      are copied onto the line only when the call site supplied them
    - setup_logging is idempotent: calling it twice does not duplicate output
"""

import json
import logging
from datetime import datetime, timezone

DOMAIN_FIELDS = (
    "error_code", "path", "method", "resource", "resource_id", "operation", "image_name",
)

_HANDLER_NAME = "portfolio_api"

# Third-party loggers that are chatty at INFO.
_QUIET_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update({
            key: getattr(record, key)
            for key in DOMAIN_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
