"""
Logging Configuration Module

One call at startup routes every logger in the service to the console
and to rotating files under logs/:

    logs/
    ├── app.log           # INFO+ from everything
    ├── error.log         # ERROR+ only
    ├── debug.log         # Everything at file_level+
    ├── dsp/dsp.log       # dsp.* (window generation, spectrum pipeline)
    └── api/api.log       # api.* (HTTP routes)

Modules never configure logging themselves; they only do
``logger = logging.getLogger(__name__)``.
"""

import os
import sys
import logging
from logging.handlers import RotatingFileHandler

LOG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'logs')

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

# Logger name -> dedicated file, relative to the log directory
COMPONENT_LOGS = {
    'dsp': 'dsp/dsp.log',
    'api': 'api/api.log',
}

# Third-party loggers held above DEBUG
QUIET_LOGGERS = {
    'uvicorn': logging.INFO,
    'uvicorn.access': logging.WARNING,
    'uvicorn.error': logging.INFO,
}


def _file_handler(log_dir, filename, level):
    path = os.path.join(log_dir, filename)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=MAX_BYTES,
                                  backupCount=BACKUP_COUNT, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(console_level=logging.INFO, file_level=logging.DEBUG, log_dir=None):
    """
    Configure application-wide logging.

    Replaces any handlers already on the root logger, so calling it
    twice does not duplicate output.

    Args:
        console_level: Level for stdout
        file_level: Level for debug.log and the component logs
        log_dir: Directory for log files (defaults to LOG_DIR)
    """
    log_dir = log_dir or LOG_DIR

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()
    root.addHandler(console)
    root.addHandler(_file_handler(log_dir, 'app.log', logging.INFO))
    root.addHandler(_file_handler(log_dir, 'error.log', logging.ERROR))
    root.addHandler(_file_handler(log_dir, 'debug.log', file_level))

    for name, filename in COMPONENT_LOGS.items():
        component = logging.getLogger(name)
        component.handlers.clear()
        component.addHandler(_file_handler(log_dir, filename, file_level))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized in %s (console=%s, files=%s)",
                os.path.abspath(log_dir),
                logging.getLevelName(console_level),
                logging.getLevelName(file_level))


def get_logger(name):
    """Return the logger for a module, typically get_logger(__name__)."""
    return logging.getLogger(name)


def set_log_level(level):
    """Change the console level at runtime; file handlers are untouched."""
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def get_log_files(log_dir=None):
    """
    List current log files.

    Returns:
        dict: relative path -> {'path', 'size', 'size_human'}
    """
    log_dir = log_dir or LOG_DIR
    log_files = {}
    for root, _dirs, files in os.walk(log_dir):
        for file in files:
            if not file.endswith('.log'):
                continue
            filepath = os.path.join(root, file)
            size = os.path.getsize(filepath)
            log_files[os.path.relpath(filepath, log_dir)] = {
                'path': filepath,
                'size': size,
                'size_human': format_size(size),
            }
    return log_files


def format_size(size_bytes):
    """Format byte size to human-readable string."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"
