"""Logging configuration for log2trello.

Every module logs under the ``log2trello`` namespace (``log2trello.transport``,
``log2trello.trello_client``...). ``TrelloExceptionHandler`` drops records from
that namespace, so attaching it to the root logger can never turn a failed
upload into another upload. ``setup_logging`` goes further and stops those
records from reaching the host's root handlers at all.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "log2trello"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def is_own_record(record: logging.LogRecord) -> bool:
    """True for records emitted by log2trello itself"""
    return record.name == LOGGER_NAME or record.name.startswith(LOGGER_NAME + ".")


def setup_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Send log2trello's own records to stderr (and optionally a file).

    At DEBUG every Trello request is logged; at INFO only uploaded cards and
    exception-hook (un)registration.

    Args:
        level: DEBUG, INFO, WARNING or ERROR; anything else means INFO
        log_file: Optional path; file lines carry timestamps

    Returns:
        The configured ``log2trello`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(LEVELS.get(level.upper(), logging.INFO))

    # Reconfiguring replaces earlier handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("log2trello %(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
