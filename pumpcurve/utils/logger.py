"""
Structured Logging Configuration

structlog on top of stdlib logging. Console output goes to stderr so that
command output on stdout (quotes, decoded accounts) stays machine readable.
JSON through python-json-logger by default; an optional rotating file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional

import structlog
from pythonjsonlogger import jsonlogger

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
PLAIN_DATEFMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILE = "logs/pumpcurve.log"


def _processors(json_format: bool) -> List:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        renderer,
    ]


def _handlers(config: Dict, level: int) -> List[logging.Handler]:
    if config.get("json_format", True):
        formatter = jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    else:
        formatter = logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATEFMT)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if config.get("file_enabled", False):
        path = Path(config.get("file_path", DEFAULT_LOG_FILE))
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=config.get("max_file_size_mb", 10) * 1024 * 1024,
                backupCount=config.get("backup_count", 3),
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: Optional[Dict] = None) -> None:
    """
    Configure structured logging

    Args:
        config: "logging" section of config.yaml (EngineConfig.logging).
            Keys: level, json_format, file_enabled, file_path,
            max_file_size_mb, backup_count.
    """
    config = config or {}
    level_name = str(config.get("level", "WARNING")).upper()
    level = getattr(logging, level_name, logging.WARNING)

    structlog.configure(
        processors=_processors(config.get("json_format", True)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = _handlers(config, level)

    structlog.get_logger().debug("Logging configured", level=level_name)


def get_logger(name: Optional[str] = None):
    """
    Get a logger instance

    Args:
        name: Logger name (defaults to caller's module)

    Returns:
        structlog logger
    """
    return structlog.get_logger(name)
