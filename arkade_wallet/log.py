"""Loguru setup with secret redaction."""

import re
import sys
from pathlib import Path
from typing import Any

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

REDACTED = "[REDACTED]"

# 64-hex runs (private keys) and 12+ word lowercase runs (seed phrases)
_SECRET_PATTERNS = (
    re.compile(r"(?<![0-9a-fA-F])(?:0x)?[0-9a-fA-F]{64}(?![0-9a-fA-F])"),
    re.compile(r"\b(?:[a-z]{3,8} ){11,23}[a-z]{3,8}\b"),
)


def redact(text: str) -> str:
    """Replace anything that looks like key material with a placeholder."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(REDACTED, text)
    return text


def _redact_record(record: Any) -> bool:
    record["message"] = redact(record["message"])
    return True


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Configure loguru logging.

    Args:
        level: Minimum level for the stderr handler.
        log_file: Optional path for a rotating DEBUG-level file log.
    """
    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=level,
        filter=_redact_record,
        backtrace=False,
        diagnose=False,
    )
    if log_file is not None:
        logger.add(
            str(log_file),
            rotation="10 MB",
            retention="7 days",
            level="DEBUG",
            filter=_redact_record,
            backtrace=False,
            diagnose=False,
        )
