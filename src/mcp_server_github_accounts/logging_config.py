import json
import logging
import sys
from pathlib import Path
from typing import Optional


class SafeStreamHandler(logging.StreamHandler):
    """
    Stream handler that gracefully handles closed streams during shutdown.
    """

    def handleError(self, record):
        error = sys.exc_info()[1]
        if isinstance(error, (ValueError, OSError)):
            message = str(error).lower()
            # stderr may already be closed when the MCP client hangs up
            if "closed file" in message or "bad file descriptor" in message:
                return
        super().handleError(record)


class StructuredLogFormatter(logging.Formatter):
    """
    Formats log records as structured JSON with contextual fields.
    """

    CONTEXT_FIELDS = ("request_id", "tool", "account", "duration_ms")

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in self.CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            log_record["exception"] = record.exc_text
        return json.dumps(log_record, ensure_ascii=False)


PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    structured: bool = True,
) -> None:
    """
    Centralized logging configuration.

    Everything goes to stderr; stdout belongs to the MCP stdio transport.
    An optional log file always records at DEBUG level.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = SafeStreamHandler(sys.stderr)
    handler.setLevel(log_level.upper())
    if structured:
        handler.setFormatter(StructuredLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    root_logger.addHandler(handler)

    if log_file is not None:
        log_file = Path(log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(StructuredLogFormatter())
        root_logger.addHandler(file_handler)
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(log_level.upper())

    logging.getLogger("asyncio").setLevel("WARNING")
    logging.getLogger("mcp").setLevel("WARNING")
