import logging
import sys
import json
import os
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from typing import Optional, TextIO

from .config import LoggingConfig
from .context import get_current_lookup

_STANDARD_RECORD_KEYS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'message', 'taskName', 'lookup',
}


class StructuredFormatter(logging.Formatter):
    """Formatter for structured logging with lookup key support"""

    def __init__(self, output_format: str = 'text'):
        super().__init__()
        self.output_format = output_format

    def format(self, record):
        log_data = {
            'timestamp': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        lookup = getattr(record, 'lookup', None) or get_current_lookup()
        if lookup:
            log_data['lookup'] = lookup

        # Add any other extra fields
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_KEYS:
                if isinstance(value, datetime):
                    log_data[key] = value.isoformat()
                else:
                    log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.output_format == 'json':
            return json.dumps(log_data, default=str)

        base_msg = f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"
        if 'lookup' in log_data:
            base_msg += f" [lookup={log_data['lookup']}]"
        if 'exception' in log_data:
            base_msg += f"\n{log_data['exception']}"
        return base_msg


def configure_logging(config: Optional[LoggingConfig] = None, stream: Optional[TextIO] = None):
    """Configure the root logger to use structured formatting for all logs

    Console output goes to stream, stdout by default.
    """
    config = config or LoggingConfig()
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    formatter = StructuredFormatter(config.format)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.log_dir:
        os.makedirs(config.log_dir, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=os.path.join(config.log_dir, 'market-data.log'),
            when='midnight',
            interval=1,
            backupCount=30,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configure_third_party_loggers()


def _configure_third_party_loggers():
    """Configure specific third-party library loggers with appropriate levels"""
    # aiohttp: Set to WARNING to reduce HTTP request/response noise
    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('aiohttp.client').setLevel(logging.WARNING)
