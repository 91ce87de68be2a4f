"""Configure application logging.

Sets up the root logger with a console handler and, optionally, a
rotating file handler. Records are formatted as JSON and carry the
request context fields (``request_id``, ``user_id``) when the caller
supplies them through ``extra``.
"""

import json
import logging
import logging.handlers
import os
from datetime import datetime, timezone

_HANDLER_MARKER = '_storefront_handler'


class JsonFormatter(logging.Formatter):
    """Format log records as JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }
        if hasattr(record, "request_id"):
            log_record["request_id"] = getattr(record, "request_id")
        if hasattr(record, "user_id"):
            log_record["user_id"] = getattr(record, "user_id")
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            log_record.update(extra)
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def configure_logging(level: int = logging.INFO, log_dir: str = "logs", to_file: bool = True) -> None:
    """Configure the root logger with JSON formatting.

    Args:
        level: Logging level for the root logger.
        log_dir: Directory where log files are written. Created if missing.
        to_file: Also write to a rotating ``storefront.log`` file.

    Calling this more than once replaces the handlers it installed earlier
    and leaves any other handlers (pytest's capture handler, for instance)
    alone.
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = JsonFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    setattr(console_handler, _HANDLER_MARKER, True)
    logger.addHandler(console_handler)

    if to_file:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(log_dir, "storefront.log"),
            maxBytes=5 * 1024 * 1024,  # 5 MB per log file
            backupCount=3,
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        setattr(file_handler, _HANDLER_MARKER, True)
        logger.addHandler(file_handler)
