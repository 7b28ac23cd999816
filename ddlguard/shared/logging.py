import json
import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "ddlguard"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _JsonFormatter(logging.Formatter):
    """One JSON object per line; dict messages are embedded as-is."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, LOG_DATEFMT),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict) and not record.args:
            payload["message"] = record.msg
        else:
            payload["message"] = record.getMessage()
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _DdlguardHandler(logging.StreamHandler):
    pass


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        if isinstance(handler, _DdlguardHandler):
            logger.removeHandler(handler)

    handler = _DdlguardHandler(stream or sys.stderr)
    if json_logs:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)

    return logger
