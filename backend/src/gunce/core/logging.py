"""
Logging configuration for the Günce Defteri application.

Provides structured JSON logging with support for multiple log files,
log rotation, and masking of passwords, hashes and encryption packages.
"""

import json
import logging
import logging.handlers
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict

MASK = "***MASKED***"


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in logs."""

    SENSITIVE_KEYS = {
        "password",
        "password_hash",
        "secret",
        "token",
        "authorization",
        "apikey",
        "api_key",
        "encrypted_content",
        "ciphertext",
    }

    # key=value or "key": "value" pairs inside free-form messages
    _PAIR_PATTERN = re.compile(
        r"(?P<key>[\"']?(?:%s)[\"']?\s*[:=]\s*)(?P<value>\"[^\"]*\"|'[^']*'|[^\s,}]+)"
        % "|".join(sorted(SENSITIVE_KEYS, key=len, reverse=True)),
        re.IGNORECASE,
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask sensitive data in log records."""
        if isinstance(record.msg, str):
            record.msg = self._mask_sensitive_data(record.msg)
        if isinstance(record.args, dict):
            record.args = self._mask_dict(record.args)
        if hasattr(record, "extra_data") and isinstance(record.extra_data, dict):
            record.extra_data = self._mask_dict(record.extra_data)
        return True

    def _mask_sensitive_data(self, text: str) -> str:
        """Mask the values of sensitive key/value pairs in text."""
        return self._PAIR_PATTERN.sub(lambda m: f"{m.group('key')}{MASK}", text)

    def _mask_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Mask sensitive data in dictionary."""
        masked = {}
        for key, value in data.items():
            if any(sensitive in str(key).lower() for sensitive in self.SENSITIVE_KEYS):
                masked[key] = MASK
            elif isinstance(value, dict):
                masked[key] = self._mask_dict(value)
            else:
                masked[key] = value
        return masked


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs logs in JSON format."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data["context"] = record.extra_data

        return json.dumps(log_data, ensure_ascii=False, default=str)


# Log file per area; loggers under the given package prefix write to it.
LOG_FILES = {
    "gunce": "app.log",
    "gunce.services.diary_service": "diary.log",
    "gunce.services.storage": "diary.log",
    "gunce.services.sync_service": "sync.log",
    "gunce.core.security": "security.log",
    "gunce.core.crypto": "security.log",
}


def _make_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JSONFormatter()
    return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def setup_logging(config: Any) -> None:
    """
    Set up logging configuration.

    Args:
        config: Configuration object with logging settings
    """
    os.makedirs(config.LOG_DIR, exist_ok=True)
    level = getattr(logging, config.LOG_LEVEL.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    sensitive_filter = SensitiveDataFilter()

    # Console handler (stdout)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.addFilter(sensitive_filter)
    console_handler.setFormatter(_make_formatter(config.LOG_FORMAT))
    root_logger.addHandler(console_handler)

    # Errors from every area also land in errors.log
    error_handler = logging.handlers.RotatingFileHandler(
        os.path.join(config.LOG_DIR, "errors.log"),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.addFilter(sensitive_filter)
    error_handler.setFormatter(_make_formatter(config.LOG_FORMAT))
    root_logger.addHandler(error_handler)

    file_handlers: Dict[str, logging.Handler] = {}
    for logger_name, filename in LOG_FILES.items():
        handler = file_handlers.get(filename)
        if handler is None:
            # Rotating file handler (10MB per file, 5 backups)
            handler = logging.handlers.RotatingFileHandler(
                os.path.join(config.LOG_DIR, filename),
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            handler.setLevel(level)
            handler.addFilter(sensitive_filter)
            handler.setFormatter(_make_formatter(config.LOG_FORMAT))
            file_handlers[filename] = handler

        logger = logging.getLogger(logger_name)
        for existing in logger.handlers[:]:
            logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger: Logger instance
    """
    return logging.getLogger(name)
