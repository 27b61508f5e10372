#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Logging setup for QR Library.

Features:
- Level-specific compact console format with optional colours
- Structured JSON output (``--log-json`` or ``QRLIBRARY_LOG_JSON=1``)
- Optional rotating log file
- Lightweight operation timing for scan/export/import
"""

import logging
import logging.handlers
import os
import sys
import time
import threading
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any
from functools import lru_cache
from collections import defaultdict

ROOT_LOGGER_NAME = "qrlibrary"
LOG_FILE_NAME = "qrlibrary.log"
SLOW_OPERATION_SECONDS = 1.0

# =====================================================================================================
# Formatters
# =====================================================================================================


class FastFormatter(logging.Formatter):
    """Compact formatter with one pre-built format per level."""

    def __init__(self, enable_colors: bool = False):
        super().__init__()
        self.enable_colors = enable_colors

        self._formats = {
            logging.ERROR: "[{asctime}] ERROR   [{name}] {message}",
            logging.WARNING: "[{asctime}] WARNING [{name}] {message}",
            logging.INFO: "[{asctime}] INFO    {message}",
            logging.DEBUG: "[{asctime}] DEBUG   {name}:{lineno} - {message}"
        }
        self._formatters = {
            level: logging.Formatter(fmt, style='{', datefmt='%H:%M:%S')
            for level, fmt in self._formats.items()
        }

        self.colors = {
            'ERROR': '\033[91m',     # Red
            'WARNING': '\033[93m',   # Yellow
            'INFO': '\033[92m',      # Green
            'DEBUG': '\033[94m',     # Blue
            'RESET': '\033[0m'
        } if enable_colors else {}

    def format(self, record):
        formatter = self._formatters.get(record.levelno, self._formatters[logging.INFO])
        text = formatter.format(record)
        color = self.colors.get(record.levelname)
        if color:
            return f"{color}{text}{self.colors['RESET']}"
        return text


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter (optional)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "thread": record.threadName,
            "process": record.process,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        details = getattr(record, "details", None)
        if details is not None:
            payload["details"] = details
        return json.dumps(payload, ensure_ascii=False, default=str)

# =====================================================================================================
# Performance logger
# =====================================================================================================


class SimplePerformanceLogger:
    """Accumulates operation timings and warns about slow ones."""

    def __init__(self, name: str = "performance"):
        self.logger = logging.getLogger(name)
        self.metrics = defaultdict(float)
        self.counts = defaultdict(int)
        self._lock = threading.Lock()

    def log_timing(self, operation: str, duration: float):
        with self._lock:
            self.metrics[operation] += duration
            self.counts[operation] += 1

        if duration > SLOW_OPERATION_SECONDS:
            self.logger.warning("SLOW: %s took %.2fs", operation, duration)
        else:
            self.logger.debug("%s took %.3fs", operation, duration)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            stats = {}
            for operation in self.metrics:
                count = self.counts[operation]
                total = self.metrics[operation]
                stats[operation] = {
                    'count': count,
                    'total_time': total,
                    'avg_time': total / count if count > 0 else 0
                }
            return stats

# =====================================================================================================
# Main setup function
# =====================================================================================================


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    enable_file_logging: bool = False,
    enable_console_logging: bool = True,
    max_log_size: str = "10MB",
    backup_count: int = 3,
    structured_json: Optional[bool] = None,
    stream=None,
) -> Dict[str, Any]:
    """Configure the ``qrlibrary`` logger hierarchy.

    Handlers are attached to the package logger rather than the root logger so
    embedding applications keep control of their own logging.
    """
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)
    use_json = structured_json if structured_json is not None else _env_bool("QRLIBRARY_LOG_JSON")

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(numeric_level)
    package_logger.propagate = False

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    handlers: Dict[str, logging.Handler] = {}

    if enable_console_logging:
        target = stream if stream is not None else sys.stderr
        console_handler = logging.StreamHandler(target)
        console_handler.setLevel(numeric_level)

        enable_colors = (hasattr(target, 'isatty') and
                         target.isatty() and
                         os.environ.get('TERM') != 'dumb')

        console_handler.setFormatter(JsonFormatter() if use_json else FastFormatter(enable_colors=enable_colors))
        package_logger.addHandler(console_handler)
        handlers['console'] = console_handler

    log_dir_path: Optional[Path] = None
    if enable_file_logging:
        log_dir_path = Path(log_dir) if log_dir else Path("logs")
        log_dir_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            str(log_dir_path / LOG_FILE_NAME),
            maxBytes=_parse_size_string(max_log_size),
            backupCount=backup_count,
            encoding='utf-8',
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JsonFormatter() if use_json else FastFormatter())
        package_logger.addHandler(file_handler)
        handlers['file'] = file_handler

    package_logger.debug(
        "Logging initialised (level=%s, json=%s, file=%s)",
        logging.getLevelName(numeric_level), use_json, enable_file_logging,
    )

    return {
        'logger': package_logger,
        'handlers': handlers,
        'log_dir': log_dir_path,
    }

# =====================================================================================================
# Utility functions
# =====================================================================================================


def _parse_size_string(size_str: str) -> int:
    """Parse size string into bytes."""
    size_str = str(size_str).upper().strip()

    multipliers = {
        'KB': 1024,
        'MB': 1024 ** 2,
        'GB': 1024 ** 3,
        'B': 1,
    }

    for suffix, multiplier in multipliers.items():
        if size_str.endswith(suffix):
            try:
                number = float(size_str[:-len(suffix)].strip())
                return int(number * multiplier)
            except ValueError:
                continue

    try:
        return int(float(size_str))
    except ValueError:
        pass

    return 10 * 1024 * 1024  # Default 10MB


@lru_cache(maxsize=32)
def get_logger(name: str) -> logging.Logger:
    """Get cached logger instance below the package logger."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


_performance_logger = SimplePerformanceLogger(f"{ROOT_LOGGER_NAME}.performance")


def get_performance_logger() -> SimplePerformanceLogger:
    return _performance_logger


class LoggingTimer:
    """Times a block and records it on the performance logger."""

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.start_time = None
        self.duration = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration = time.perf_counter() - self.start_time
            _performance_logger.log_timing(self.operation_name, self.duration)
