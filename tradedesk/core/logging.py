import logging
import re
import sys
from typing import Any, Dict, Optional

from tradedesk.core.config import settings

_CONFIGURED_LOGGERS: Dict[str, logging.Logger] = {}

# Order matters: whole tokens and hashes are masked before key=value pairs
_MASKS = [
    # Access tokens, with or without the Bearer prefix
    (re.compile(r"eyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+"), "<jwt>"),
    # bcrypt password hashes
    (re.compile(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}"), "<bcrypt>"),
    # Credentials inside a DB_CONN_STRING, e.g. postgresql://user:pw@host/db
    (re.compile(r"(\w+(?:\+\w+)?://[^:/\s]+:)[^@\s]+(@)"), r"\1***\2"),
    # password=..., "password": "...", SECRET_KEY=..., access_token=...
    (
        re.compile(
            r"((?:password(?:_hash)?|secret(?:_key)?|access_token)[\"']?\s*[=:]\s*[\"']?)[^\"'\s,}]+",
            re.IGNORECASE,
        ),
        r"\1***",
    ),
]


def mask_sensitive(text: str) -> str:
    for pattern, replacement in _MASKS:
        text = pattern.sub(replacement, text)
    return text


def _mask_arg(arg: Any) -> Any:
    return mask_sensitive(arg) if isinstance(arg, str) else arg


class SensitiveDataFilter(logging.Filter):
    """Masks tokens, password hashes and DB credentials before a record is emitted"""

    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = mask_sensitive(record.msg)

        if isinstance(record.args, dict):
            record.args = {key: _mask_arg(value) for key, value in record.args.items()}
        elif record.args:
            record.args = tuple(_mask_arg(arg) for arg in record.args)

        return True


def setup_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    if name in _CONFIGURED_LOGGERS:
        return _CONFIGURED_LOGGERS[name]

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    logger.setLevel(level)
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler.addFilter(SensitiveDataFilter())
    logger.addHandler(handler)

    _CONFIGURED_LOGGERS[name] = logger
    return logger


def configure_root_logger():
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(logging.INFO)

    # Library loggers stay quiet unless something goes wrong
    for noisy in ("sqlalchemy.engine", "celery", "urllib3", "jose"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return setup_logger("tradedesk")


app_logger = configure_root_logger()
