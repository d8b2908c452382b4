"""
Logger utility module for consistent logging across the application
Adds rotating file logging under the helper's logs directory
"""
import logging
import sys
import os
from pathlib import Path
from datetime import datetime
from typing import Optional
from logging.handlers import RotatingFileHandler

from northstar_dev_helper.utils.paths import get_logs_dir


DETAILED_FORMAT = '%(asctime)s.%(msecs)03d [%(levelname)8s] %(name)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


# Loggers that configured their own handler before root logging was set up
_standalone_loggers = set()


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a helper logger

    Once setup_comprehensive_logging has run, loggers simply propagate to the
    root handlers. Before that (library use, module import time) a logger gets
    its own stderr handler, and setup_comprehensive_logging later hands it
    back to the root logger.
    """
    logger = logging.getLogger(name)

    if logging.getLogger().handlers:
        logger.setLevel(level if level is not None else logging.NOTSET)
        logger.propagate = True
        return logger

    if name not in _standalone_loggers:
        level = logging.INFO if level is None else level
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
        _standalone_loggers.add(name)

    return logger


def _attach_standalone_loggers():
    """Route loggers created before setup through the root handlers"""
    for name in list(_standalone_loggers):
        logger = logging.getLogger(name)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
    _standalone_loggers.clear()


def get_log_file_path() -> Path:
    """Get a timestamped log file path in the logs directory"""
    logs_dir = get_logs_dir()
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"northstar_dev_helper_{timestamp}.log"


def setup_comprehensive_logging(level: int = logging.INFO, log_to_file: bool = True) -> Optional[Path]:
    """Setup logging with console output and, optionally, a rotating log file

    Returns:
        Path to the log file, or None if file logging is disabled
    """
    console_formatter = logging.Formatter('[%(levelname)s] %(message)s')

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_file_path = None
    if log_to_file:
        log_file_path = get_log_file_path()
        file_handler = RotatingFileHandler(log_file_path, maxBytes=1024*1024, backupCount=5, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    # Console handler goes to stderr so --json output on stdout stays parseable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)

    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)
    _attach_standalone_loggers()

    logger = logging.getLogger(__name__)
    logger.debug("Northstar Dev Testing Helper - Starting")
    if log_file_path:
        logger.debug(f"Log file: {log_file_path}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.executable} ({sys.version.split()[0]})")
    logger.debug(f"Platform: {os.name}")

    return log_file_path
