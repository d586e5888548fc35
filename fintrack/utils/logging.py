"""Structured logging configuration"""

import logging
import json
import os
from datetime import datetime


class JSONFormatter(logging.Formatter):
    """One JSON object per record; keyword context is merged in from `record.context`"""

    def format(self, record):
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **getattr(record, "context", {}),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class StructuredLogger:
    """Thin wrapper that accepts context fields as keyword arguments"""

    def __init__(self, name: str, level: str = "INFO"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        # One console handler per named logger
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def log(self, level: str, message: str, **context):
        self.logger.log(getattr(logging, level.upper()), message, extra={"context": context})

    def info(self, message: str, **context):
        self.log("info", message, **context)

    def warning(self, message: str, **context):
        self.log("warning", message, **context)

    def error(self, message: str, **context):
        self.log("error", message, **context)

    def debug(self, message: str, **context):
        self.log("debug", message, **context)


def get_logger(name: str) -> StructuredLogger:
    """Get or create structured logger; level comes from LOG_LEVEL"""
    return StructuredLogger(name, os.getenv("LOG_LEVEL", "INFO"))
