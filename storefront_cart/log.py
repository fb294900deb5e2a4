"""Logging setup."""

import logging

import structlog

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with JSON rendering and ISO timestamps.

    Unknown level names fall back to INFO.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LEVELS.get(level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def mask_card_number(card_number: str) -> str:
    """Keep only the last four digits of a card number for log output."""
    if len(card_number) <= 4:
        return "*" * len(card_number)
    return "*" * (len(card_number) - 4) + card_number[-4:]
