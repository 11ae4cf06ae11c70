"""
Logging setup for the CLI and for the applications that want it the same way.

The library itself never configures the logging: it only logs to its
per-module loggers (``kubeswagger.*``). It is the application's decision where
and how to output the logs. :func:`configure` is a shortcut for the typical
setup: one stream handler on the root logger, formatted as plain text or JSON.
"""
import enum
import logging
from collections.abc import MutableMapping
from typing import Any

import pythonjsonlogger.json


class LogFormat(enum.Enum):
    """ Log formats, as specified on CLI. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = '-json-'  # detected by identity, never used as a format string


class TextFormatter(logging.Formatter):
    pass


class JsonFormatter(pythonjsonlogger.json.JsonFormatter):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)

    def add_fields(
            self,
            log_record: dict[str, Any],
            record: logging.LogRecord,
            message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        _add_severity(log_record, record)


def _add_severity(log_record: MutableMapping[str, Any], record: logging.LogRecord) -> None:
    if 'severity' not in log_record:
        log_record['severity'] = (
            "debug" if record.levelno <= logging.DEBUG else
            "info" if record.levelno <= logging.INFO else
            "warn" if record.levelno <= logging.WARNING else
            "error" if record.levelno <= logging.ERROR else
            "fatal")


# The handler installed by us, if any, to be replaced on re-configuration.
_handler: logging.Handler | None = None


def configure(
        debug: bool | None = None,
        verbose: bool | None = None,
        quiet: bool | None = None,
        log_format: LogFormat | str = LogFormat.FULL,
) -> None:
    global _handler
    log_level = 'DEBUG' if debug or verbose else 'WARNING' if quiet else 'INFO'
    formatter = make_formatter(log_format=log_format)
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger = logging.getLogger()
    if _handler is not None:
        logger.removeHandler(_handler)
    logger.addHandler(handler)
    logger.setLevel(log_level)
    _handler = handler

    # Keep only our own messages unless in the debug mode: aiohttp & asyncio are too noisy.
    for name in ['asyncio', 'aiohttp']:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)


def make_formatter(
        log_format: LogFormat | str = LogFormat.FULL,
) -> logging.Formatter:
    if log_format is LogFormat.JSON:
        return JsonFormatter()
    elif isinstance(log_format, LogFormat):
        return TextFormatter(log_format.value)
    elif isinstance(log_format, str):
        return TextFormatter(log_format)
    else:
        raise ValueError(f"Unsupported log format: {log_format!r}")
