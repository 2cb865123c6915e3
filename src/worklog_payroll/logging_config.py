"""Logging setup for the service."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the package logger."""
    logger = logging.getLogger("worklog_payroll")
    logger.setLevel(level)
    if not any(getattr(h, "_worklog_payroll", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._worklog_payroll = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
