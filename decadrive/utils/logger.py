"""
Logging utilities with customer data masking.

Customer names and phone numbers must never reach a log file in
clear text. setup_logger() attaches SensitiveDataFilter to every handler
it creates, so records from all package modules are masked on output.
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional


# phone=0712345678, "phone": "0712345678"
PHONE_FIELD = re.compile(r'(phone["\']?\s*[:=]\s*["\']?)([^"\'\s,}]+)', re.IGNORECASE)
# name='Ann Lee', "name": "Ann Lee" (quoted values only)
NAME_FIELD = re.compile(r'(name["\']?\s*[:=]\s*["\'])([^"\']+)', re.IGNORECASE)
# Bare phone-like digit runs
LONG_DIGITS = re.compile(r'(?<![\w*])\d{8,}(?!\w)')


def mask_phone(phone: str) -> str:
    """
    Mask a phone number, keeping the last two digits.

    Examples:
        >>> mask_phone("0712345678")
        '********78'
        >>> mask_phone("12")
        '***'
    """
    if not phone or len(phone) < 4:
        return "***"
    return "*" * (len(phone) - 2) + phone[-2:]


def mask_name(name: str) -> str:
    """
    Mask a customer name, keeping initials.

    Examples:
        >>> mask_name("Ann Lee")
        'A*** L***'
    """
    parts = [part for part in (name or "").split() if part]
    if not parts:
        return "***"
    return " ".join(part[0] + "***" for part in parts)


class SensitiveDataFilter(logging.Filter):
    """
    Logging filter that masks customer details.

    Scans log messages for ``phone=...`` / ``name=...`` style pairs and
    for long digit runs, and masks them before output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask the record message in place; never drops a record."""
        message = str(record.msg)
        message = PHONE_FIELD.sub(lambda m: m.group(1) + mask_phone(m.group(2)), message)
        message = NAME_FIELD.sub(lambda m: m.group(1) + mask_name(m.group(2)), message)
        message = LONG_DIGITS.sub(lambda m: mask_phone(m.group(0)), message)
        record.msg = message
        return True


LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Rotation for the optional log file
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def setup_logger(
    name: str = "decadrive",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger.

    Module loggers (``logging.getLogger(__name__)``) propagate to it, so
    one call at startup covers the whole package. Calling it again for
    the same name returns the logger unchanged.

    Args:
        name: Logger name
        level: Minimum level to emit
        log_file: Also write to this file, rotated at 10MB

    Returns:
        The configured logger

    Examples:
        >>> logger = setup_logger(level=logging.DEBUG)
        >>> logger.info("Booking session started")
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(level)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=MAX_LOG_BYTES,
                backupCount=LOG_BACKUPS,
                encoding='utf-8'
            )
        )

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    # Handler filters also see records from child loggers
    masking = SensitiveDataFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(masking)
        logger.addHandler(handler)

    return logger
