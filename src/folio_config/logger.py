import logging
import sys
import json
import os
import gzip
import shutil
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from .loader import get_config
from .models import LoggingConfig

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'taskName', 'getMessage',
    'exc_info', 'exc_text', 'stack_info', 'message',
])


class CompressingTimedRotatingFileHandler(TimedRotatingFileHandler):
    """Daily rotating file handler that stores each rotated file as .gz"""

    def __init__(self, filename: str, **kwargs):
        super().__init__(filename, **kwargs)
        self.namer = _gzip_name
        self.rotator = _gzip_rotate


def _gzip_name(default_name: str) -> str:
    return f"{default_name}.gz"


def _gzip_rotate(source: str, dest: str) -> None:
    """Compress the closed log file into ``dest`` and drop the original"""
    try:
        with open(source, "rb") as f_in, gzip.open(dest, "wb") as f_out:
            shutil.copyfileobj(f_in, f_out)
    except OSError as e:
        # Keep the uncompressed file; the rollover itself still succeeds
        print(f"Error during log compression: {e}", file=sys.stderr)
        return
    os.remove(source)


class StructuredFormatter(logging.Formatter):
    """Formatter for structured logging with identifier support"""

    def __init__(self, output_format: str = 'text'):
        super().__init__()
        self.output_format = output_format

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith('_'):
                continue
            if isinstance(value, datetime):
                log_data[key] = value.isoformat()
            else:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.output_format == 'json':
            return json.dumps(log_data, default=str)

        base_msg = f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"
        if 'identifier' in log_data:
            base_msg += f" [identifier={log_data['identifier']}]"
        if 'exception' in log_data:
            base_msg += f"\n{log_data['exception']}"
        return base_msg


def configure_root_logger(config: Optional[LoggingConfig] = None):
    """Configure the root logger to use structured formatting for all logs"""
    config = config or get_config().logging
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, config.level))

    formatter = StructuredFormatter(config.format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file_path:
        log_dir = os.path.dirname(config.file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = CompressingTimedRotatingFileHandler(
            filename=config.file_path,
            when='midnight',
            interval=1,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger
