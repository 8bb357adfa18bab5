"""Loguru structured logging configuration.

Provides human-readable stderr logging with configurable log level, an
opt-in JSON sink for records bound with ``json_output=True``, and an
optional rotating log file when a ``log_dir`` is provided.  Bound extras
that look like secrets are masked before any sink sees them.
"""

import sys
from pathlib import Path

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"

_SECRET_KEYS: frozenset[str] = frozenset({"password", "plaintext", "hashed_password", "database_url"})
_MASK = "***"


def _mask_secrets(record: dict) -> None:
    """Replace secret-looking ``extra`` values in place."""
    extra = record["extra"]
    for key in extra:
        if key.lower() in _SECRET_KEYS:
            extra[key] = _MASK


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Configure Loguru sinks.

    Args:
        log_level: Minimum log level to emit.
        log_dir: Optional directory for log files.  When set, a rotating
            file sink is added (rotated every 24 hours, retained 7 days).
    """
    level = log_level.upper()
    logger.remove()
    logger.configure(patcher=_mask_secrets)
    logger.add(
        sys.stderr,
        level=level,
        format=_LOG_FORMAT,
        serialize=False,
    )
    logger.add(
        sys.stderr,
        level=level,
        serialize=True,
        filter=lambda record: record["extra"].get("json_output", False),
    )

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "cris-api.log",
            level=level,
            format=_LOG_FORMAT,
            rotation="24h",
            retention="7 days",
        )
